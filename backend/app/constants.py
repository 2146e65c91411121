DEFAULTS = {
    # Service title shown in the OpenAPI docs
    "APP_NAME": "vitalgraph-backend",
    # Prefix mounted in front of every router
    "API_PREFIX": "",
    # Max ranked neighbours returned by the impacts endpoint
    "GRAPH_IMPACT_LIMIT": 6,
    # Graph view served when ?detail= is omitted (core | full)
    "GRAPH_DEFAULT_DETAIL_MODE": "full",
    # |delta| below this counts as unchanged in simulation tables
    "SIMULATION_UNCHANGED_EPSILON": 0.001,
    # Weight unit assumed for callers without a saved preference
    "SIMULATION_DEFAULT_WEIGHT_UNIT": "kg",
    # JSON document used when no database URL is configured
    "STORE_DATA_PATH": ".data/health-db.json",
    # SQLAlchemy / postgres URL selecting the relational backend
    "STORE_DATABASE_URL": "",
    # Primary key of the single state row
    "STORE_STATE_KEY": "primary",
    # Attempts for mutations failing on lock or commit
    "STORE_RETRY_ATTEMPTS": 3,
    # Roles allowed on /developer routes
    "ADMIN_ROLES": ["admin"],
}
