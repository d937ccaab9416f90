"""Authorization router dependencies.

Note: These are placeholder functions that services override through
``app.dependency_overrides`` with a configured AuthorizationEngine.
"""


def get_authorization_engine():
    """Placeholder for authorization engine dependency.
    
    Services should override this dependency to provide an engine built
    with create_postgres_engine() or create_memory_engine().
    """
    raise NotImplementedError(
        "Services must provide their own authorization engine dependency"
    )
