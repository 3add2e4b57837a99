"""
Club Tests - 동아리 조회, 가입 신청 상태 전이, 멤버십 동기화
"""
import pytest
from bson import ObjectId
from loguru import logger
from pymongo.errors import PyMongoError

from database import ClubStore, MembershipSyncError


def club_url(club, suffix=""):
    return f"/api/clubs/{club['_id']}{suffix}"


def decide(client, club, user, action, headers):
    return client.put(club_url(club, "/approve-member"), json={"userId": str(user["_id"]), "action": action}, headers=headers)


def remove(client, club, user, headers):
    return client.request("DELETE", club_url(club, "/remove-member"), json={"userId": str(user["_id"])}, headers=headers)


def assert_membership_consistent(db, club_id):
    """멤버와 신청이 겹치지 않고 users.joinedClubs 와 일치"""
    club = db.clubs.find_one({"_id": club_id})
    members = set(club["members"])
    pending = {req["userId"] for req in club["pendingRequests"]}
    assert not members & pending
    joined = {user["_id"] for user in db.users.find({"joinedClubs": club_id})}
    assert joined == members


class TestClubListing:
    """GET /api/clubs, /my-clubs, /{id}"""

    def test_list_sorted_by_name(self, client, users, auth_headers):
        response = client.get("/api/clubs", headers=auth_headers(users["john"]))
        assert response.status_code == 200
        data = response.json()["data"]
        assert [c["name"] for c in data["clubs"]] == ["KRYPT", "LIFE", "SAIL", "VAAN"]
        assert data["totalCount"] == 4
        sail = data["clubs"][2]
        assert sail["memberCount"] == 0
        assert sail["canJoin"] is True
        assert sail["clubHead"]["name"] == "SAIL Club Head"
        assert "members" not in sail

    def test_requires_token(self, client, users):
        response = client.get("/api/clubs")
        assert response.status_code == 401

    def test_detail_for_outsider_hides_members(self, client, users, clubs, auth_headers):
        response = client.get(club_url(clubs["SAIL"]), headers=auth_headers(users["john"]))
        assert response.status_code == 200
        club = response.json()["data"]["club"]
        assert club["userStatus"] == {"isMember": False, "canManage": False, "hasPendingRequest": False}
        assert "members" not in club
        assert "pendingRequests" not in club

    def test_detail_for_head_shows_pending(self, client, users, clubs, auth_headers):
        client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        response = client.get(club_url(clubs["SAIL"]), headers=auth_headers(users["sail_head"]))
        club = response.json()["data"]["club"]
        assert club["userStatus"]["canManage"] is True
        assert club["members"] == []
        assert club["pendingRequests"][0]["userId"]["name"] == "John Doe"

    def test_unknown_club(self, client, users, auth_headers):
        response = client.get(f"/api/clubs/{ObjectId()}", headers=auth_headers(users["john"]))
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CLUB_NOT_FOUND"

    def test_invalid_club_id(self, client, users, auth_headers):
        response = client.get("/api/clubs/not-an-id", headers=auth_headers(users["john"]))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"

    def test_members_denied_for_non_member(self, client, users, clubs, auth_headers):
        response = client.get(club_url(clubs["SAIL"], "/members"), headers=auth_headers(users["john"]))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ACCESS_DENIED"

    def test_members_for_pr_council(self, client, users, clubs, auth_headers):
        response = client.get(club_url(clubs["SAIL"], "/members"), headers=auth_headers(users["pr"]))
        assert response.status_code == 200
        assert response.json()["data"]["memberCount"] == 0


class TestMembershipFlow:
    """NONE → PENDING → MEMBER / NONE, MEMBER → NONE"""

    def test_join_request(self, client, users, clubs, auth_headers, db):
        response = client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "pending"

        club = db.clubs.find_one({"_id": clubs["SAIL"]["_id"]})
        assert [req["userId"] for req in club["pendingRequests"]] == [users["john"]["_id"]]

    def test_duplicate_request(self, client, users, clubs, auth_headers, db):
        headers = auth_headers(users["john"])
        client.post(club_url(clubs["SAIL"], "/join-request"), headers=headers)
        response = client.post(club_url(clubs["SAIL"], "/join-request"), headers=headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "REQUEST_EXISTS"
        assert len(db.clubs.find_one({"_id": clubs["SAIL"]["_id"]})["pendingRequests"]) == 1

    def test_missed_update_is_not_reported_as_existing(self, client, users, clubs, auth_headers, db, monkeypatch):
        """신청도 멤버십도 없는데 조건부 업데이트가 빗나가면 CONCURRENT_UPDATE"""
        calls = []

        def miss(self, club_id, user_id):
            calls.append(user_id)
            return None

        monkeypatch.setattr(ClubStore, "add_join_request", miss)
        response = client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONCURRENT_UPDATE"
        assert len(calls) == 1
        assert db.clubs.find_one({"_id": clubs["SAIL"]["_id"]})["pendingRequests"] == []

    def test_only_students_request(self, client, users, clubs, auth_headers):
        response = client.post(club_url(clubs["VAAN"], "/join-request"), headers=auth_headers(users["sail_head"]))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"

    def test_approve(self, client, users, clubs, auth_headers, db):
        client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        response = decide(client, clubs["SAIL"], users["john"], "approve", auth_headers(users["sail_head"]))
        assert response.status_code == 200
        assert response.json()["data"]["memberCount"] == 1

        club = db.clubs.find_one({"_id": clubs["SAIL"]["_id"]})
        assert club["members"] == [users["john"]["_id"]]
        assert club["pendingRequests"] == []
        user = db.users.find_one({"_id": users["john"]["_id"]})
        assert user["joinedClubs"] == [clubs["SAIL"]["_id"]]
        assert_membership_consistent(db, clubs["SAIL"]["_id"])

        again = client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        assert again.status_code == 400
        assert again.json()["error"]["code"] == "ALREADY_MEMBER"

        mine = client.get("/api/clubs/my-clubs", headers=auth_headers(users["john"]))
        assert [c["name"] for c in mine.json()["data"]["clubs"]] == ["SAIL"]

    def test_other_head_cannot_approve(self, client, users, clubs, auth_headers, db):
        client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        response = decide(client, clubs["SAIL"], users["john"], "approve", auth_headers(users["vaan_head"]))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ACCESS_DENIED"
        assert db.clubs.find_one({"_id": clubs["SAIL"]["_id"]})["members"] == []

    def test_pr_council_can_approve(self, client, users, clubs, auth_headers):
        client.post(club_url(clubs["LIFE"], "/join-request"), headers=auth_headers(users["jane"]))
        response = decide(client, clubs["LIFE"], users["jane"], "approve", auth_headers(users["pr"]))
        assert response.status_code == 200

    def test_approve_without_request(self, client, users, clubs, auth_headers):
        response = decide(client, clubs["SAIL"], users["john"], "approve", auth_headers(users["sail_head"]))
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "REQUEST_NOT_FOUND"

    def test_reject(self, client, users, clubs, auth_headers, db):
        client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        response = decide(client, clubs["SAIL"], users["john"], "reject", auth_headers(users["sail_head"]))
        assert response.status_code == 200

        club = db.clubs.find_one({"_id": clubs["SAIL"]["_id"]})
        assert club["members"] == []
        assert club["pendingRequests"] == []
        assert db.users.find_one({"_id": users["john"]["_id"]})["joinedClubs"] == []

        # 거절 후 다시 신청 가능
        again = client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        assert again.status_code == 200

    def test_invalid_action(self, client, users, clubs, auth_headers):
        response = decide(client, clubs["SAIL"], users["john"], "maybe", auth_headers(users["sail_head"]))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_remove_member(self, client, users, clubs, auth_headers, db):
        head = auth_headers(users["sail_head"])
        client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["john"]))
        decide(client, clubs["SAIL"], users["john"], "approve", head)

        response = remove(client, clubs["SAIL"], users["john"], head)
        assert response.status_code == 200
        assert response.json()["data"]["memberCount"] == 0
        assert db.users.find_one({"_id": users["john"]["_id"]})["joinedClubs"] == []
        assert_membership_consistent(db, clubs["SAIL"]["_id"])

        again = remove(client, clubs["SAIL"], users["john"], head)
        assert again.status_code == 404
        assert again.json()["error"]["code"] == "NOT_A_MEMBER"

    def test_member_count_tracks_approvals_minus_removals(self, client, users, clubs, auth_headers, db):
        head = auth_headers(users["sail_head"])
        for key in ("john", "jane", "mike"):
            client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users[key]))
            decide(client, clubs["SAIL"], users[key], "approve", head)
        remove(client, clubs["SAIL"], users["jane"], head)

        club = db.clubs.find_one({"_id": clubs["SAIL"]["_id"]})
        assert set(club["members"]) == {users["john"]["_id"], users["mike"]["_id"]}
        assert_membership_consistent(db, clubs["SAIL"]["_id"])

    def test_approve_deleted_user(self, client, users, clubs, auth_headers, db):
        """사용자가 사라졌으면 USER_NOT_FOUND, 동아리는 그대로"""
        client.post(club_url(clubs["SAIL"], "/join-request"), headers=auth_headers(users["mike"]))
        db.users.delete_one({"_id": users["mike"]["_id"]})

        response = decide(client, clubs["SAIL"], users["mike"], "approve", auth_headers(users["sail_head"]))
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

        club = db.clubs.find_one({"_id": clubs["SAIL"]["_id"]})
        assert club["members"] == []
        assert [req["userId"] for req in club["pendingRequests"]] == [users["mike"]["_id"]]


class TestClubStore:
    """승인 / 제명 보상 처리"""

    def test_approve_reverts_when_user_update_fails(self, db, users, clubs, monkeypatch):
        store = ClubStore(db)
        club_id = clubs["KRYPT"]["_id"]
        user_id = users["john"]["_id"]
        store.add_join_request(club_id, user_id)

        def broken_update(*args, **kwargs):
            raise PyMongoError("connection lost")

        monkeypatch.setattr(store.users, "update_one", broken_update)
        with pytest.raises(PyMongoError):
            store.approve_request(club_id, user_id)

        club = db.clubs.find_one({"_id": club_id})
        assert club["members"] == []
        assert [req["userId"] for req in club["pendingRequests"]] == [user_id]

    def test_failed_revert_is_logged(self, db, users, clubs, monkeypatch):
        """되돌림까지 실패하면 ERROR 로그에 club / user id 가 남는다"""
        store = ClubStore(db)
        club_id = clubs["KRYPT"]["_id"]
        user_id = users["john"]["_id"]
        store.add_join_request(club_id, user_id)

        def broken_club_update(*args, **kwargs):
            raise PyMongoError("write concern timeout")

        def broken_user_update(*args, **kwargs):
            # 승인 업데이트 이후의 club 쪽 쓰기(되돌림)도 실패하게 만든다
            monkeypatch.setattr(store.collection, "update_one", broken_club_update)
            raise PyMongoError("connection lost")

        monkeypatch.setattr(store.users, "update_one", broken_user_update)

        messages = []
        sink_id = logger.add(messages.append, level="ERROR")
        try:
            with pytest.raises(PyMongoError):
                store.approve_request(club_id, user_id)
        finally:
            logger.remove(sink_id)

        revert_logs = [m for m in messages if "되돌림 실패" in m]
        assert len(revert_logs) == 1
        assert str(club_id) in revert_logs[0]
        assert str(user_id) in revert_logs[0]

    def test_approve_missing_user_raises_sync_error(self, db, clubs):
        store = ClubStore(db)
        ghost = ObjectId()
        store.add_join_request(clubs["KRYPT"]["_id"], ghost)
        with pytest.raises(MembershipSyncError):
            store.approve_request(clubs["KRYPT"]["_id"], ghost)
        assert db.clubs.find_one({"_id": clubs["KRYPT"]["_id"]})["members"] == []

    def test_join_request_is_conditional(self, db, users, clubs):
        store = ClubStore(db)
        club_id = clubs["LIFE"]["_id"]
        user_id = users["jane"]["_id"]
        assert store.add_join_request(club_id, user_id) is not None
        assert store.add_join_request(club_id, user_id) is None


class TestCreateClub:
    """POST /api/clubs (PR 위원회)"""

    def new_head(self, db):
        from database import UserStore
        return UserStore(db).create("NOVA Club Head", "PR123$", role="club_head", club_name="NOVA")

    def test_create(self, client, users, auth_headers, db):
        head = self.new_head(db)
        response = client.post(
            "/api/clubs",
            json={"name": "NOVA", "description": "Astronomy club", "clubHeadId": str(head["_id"])},
            headers=auth_headers(users["pr"]),
        )
        assert response.status_code == 201
        assert response.json()["data"]["club"]["name"] == "NOVA"
        assert db.clubs.count_documents({"name": "NOVA"}) == 1

    def test_duplicate_name(self, client, users, auth_headers):
        response = client.post(
            "/api/clubs",
            json={"name": "SAIL", "description": "again", "clubHeadId": str(users["sail_head"]["_id"])},
            headers=auth_headers(users["pr"]),
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"

    def test_head_must_exist(self, client, users, auth_headers):
        response = client.post(
            "/api/clubs",
            json={"name": "NOVA", "description": "Astronomy club", "clubHeadId": str(ObjectId())},
            headers=auth_headers(users["pr"]),
        )
        assert response.status_code == 404

    def test_only_pr_council(self, client, users, auth_headers, db):
        head = self.new_head(db)
        response = client.post(
            "/api/clubs",
            json={"name": "NOVA", "description": "Astronomy club", "clubHeadId": str(head["_id"])},
            headers=auth_headers(users["sail_head"]),
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"
