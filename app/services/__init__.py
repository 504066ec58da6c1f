"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Owned-record CRUD with ownership/admin checks, authentication flows and the
change-notification hub. Services commit transactions and publish events
only after the commit succeeds.
"""
