"""Services Layer — async orchestration over an explicit AsyncSession handle.

Invariants:
    - Every function takes the session it runs on; none opens its own
      transaction or reaches for the global db_manager
    - Mutations assume the caller wrapped them in DatabaseSessionManager.transaction()
"""
