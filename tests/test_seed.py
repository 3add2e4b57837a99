"""
Seed Tests
"""
from database.seed import INITIAL_PASSWORD, seed_database
from pr_app.auth.passwords import verify_password


class TestSeed:

    def test_counts(self, db, seeded):
        assert db.users.count_documents({"role": "student"}) == 5
        assert db.users.count_documents({"role": "club_head"}) == 4
        assert db.users.count_documents({"role": "pr_council"}) == 1
        assert db.clubs.count_documents({}) == 4

    def test_heads_linked_to_clubs(self, seeded):
        for name, club in seeded["clubs"].items():
            assert club["clubHead"] == seeded["heads"][name]["_id"]
            assert club["members"] == []
            assert club["isActive"] is True

    def test_initial_password(self, seeded):
        john = seeded["students"]["21A91A0501"]
        assert verify_password(INITIAL_PASSWORD, john["password"])
        assert john["isPasswordChanged"] is False

    def test_idempotent(self, db, seeded):
        again = seed_database(db)
        assert db.users.count_documents({}) == 10
        assert db.clubs.count_documents({}) == 4
        assert again["clubs"]["SAIL"]["_id"] == seeded["clubs"]["SAIL"]["_id"]

    def test_reset(self, db, seeded):
        db.events.insert_one({"title": "leftover"})
        fresh = seed_database(db, reset=True)
        assert db.events.count_documents({}) == 0
        assert db.users.count_documents({}) == 10
        assert fresh["clubs"]["SAIL"]["_id"] != seeded["clubs"]["SAIL"]["_id"]
