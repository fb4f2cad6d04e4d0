"""
budget_kernel -- domain types, persistence and the audited repository for
property-marketing budgets.

Layout:
    domain/     frozen dataclasses, lifecycle graph, snapshot codec, clock
    db/         SQLAlchemy base, engine/session management, ORM listeners
    models/     ORM rows for catalogue data, budgets and audit entries
    services/   repository and audit-store contracts, SQL implementations,
                and the auditing decorator
"""
