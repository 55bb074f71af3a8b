"""Rules about companies, memberships and payments.

Each policy states a rule once, in two forms: a Python predicate over loaded
models and a SQLAlchemy expression for filtering whole tables. Services and
repositories compose them; nothing here touches a session.
"""
