"""
Employee Production Dashboard

Analytics backend for turning the static employee production export into
filtered, aggregated and annotated views for a dashboard front end.

To swap the JSON export for a database feed:
    Replace loaders.load_production_export with a query returning the same
    bucket -> raw rows mapping. transforms.build_fact_production and every
    downstream function remain unchanged.

To connect to Streamlit:
    Create a session.DashboardSession, call load() once, then call
    session.view(filters=..., metric=...) on every selection change to get a
    DashboardView of cards, rankings, tables, anomalies and the trend series.

To link more account names:
    Add the lowercase aliases to config.ACCOUNT_GROUPS.
"""
