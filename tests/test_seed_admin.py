from __future__ import annotations

from medishop.infrastructure.db.seeds.seed_admin import seed_admin


def test_seed_admin_creates_verified_admin(identity_port, password_hasher):
    user = seed_admin(identity_port, password_hasher, email=" Admin@Clinic.test ", password="changeme")

    assert user.role == "admin"
    assert user.email == "admin@clinic.test"
    assert user.email_verified is True
    assert identity_port.password_hashes[user.id] == "hashed::changeme"


def test_seed_admin_is_idempotent(identity_port, password_hasher):
    first = seed_admin(identity_port, password_hasher, email="admin@clinic.test", password="changeme")
    second = seed_admin(identity_port, password_hasher, email="admin@clinic.test", password="other")

    assert second.id == first.id
    assert len(identity_port.users) == 1
    assert identity_port.password_hashes[first.id] == "hashed::changeme"
