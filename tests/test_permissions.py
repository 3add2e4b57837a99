"""
Authorization Tests - 권한 판정 함수
"""
import pytest
from bson import ObjectId

from pr_app.auth.models import CurrentUser, Role
from pr_app.auth.permissions import (
    can_manage_club,
    can_manage_event,
    can_send_to_club,
    can_view_club_detail,
    can_view_club_messages,
    has_pending_request,
    is_member_of,
)

HEAD_ID = ObjectId()
OTHER_HEAD_ID = ObjectId()
MEMBER_ID = ObjectId()
PENDING_ID = ObjectId()
OUTSIDER_ID = ObjectId()
PR_ID = ObjectId()


def caller(user_id, role):
    return CurrentUser(userId=str(user_id), name="tester", role=role)


@pytest.fixture
def club():
    return {
        "_id": ObjectId(),
        "name": "SAIL",
        "clubHead": HEAD_ID,
        "members": [MEMBER_ID],
        "pendingRequests": [{"userId": PENDING_ID}],
    }


class TestClubPermissions:
    """동아리 관리 / 조회 권한"""

    def test_pr_council_manages_any_club(self, club):
        assert can_manage_club(caller(PR_ID, Role.PR_COUNCIL), club)

    def test_head_manages_own_club(self, club):
        assert can_manage_club(caller(HEAD_ID, Role.CLUB_HEAD), club)

    def test_other_head_cannot_manage(self, club):
        assert not can_manage_club(caller(OTHER_HEAD_ID, Role.CLUB_HEAD), club)

    def test_student_cannot_manage(self, club):
        assert not can_manage_club(caller(MEMBER_ID, Role.STUDENT), club)

    def test_student_with_head_id_is_not_head(self, club):
        """역할이 student 이면 clubHead 와 id 가 같아도 관리 불가"""
        assert not can_manage_club(caller(HEAD_ID, Role.STUDENT), club)

    def test_send_matches_manage(self, club):
        for user in [
            caller(PR_ID, Role.PR_COUNCIL),
            caller(HEAD_ID, Role.CLUB_HEAD),
            caller(OTHER_HEAD_ID, Role.CLUB_HEAD),
            caller(MEMBER_ID, Role.STUDENT),
        ]:
            assert can_send_to_club(user, club) == can_manage_club(user, club)

    def test_view_detail(self, club):
        assert can_view_club_detail(caller(MEMBER_ID, Role.STUDENT), club)
        assert can_view_club_detail(caller(HEAD_ID, Role.CLUB_HEAD), club)
        assert not can_view_club_detail(caller(OUTSIDER_ID, Role.STUDENT), club)
        assert not can_view_club_detail(caller(PENDING_ID, Role.STUDENT), club)

    def test_view_messages(self, club):
        assert can_view_club_messages(caller(PR_ID, Role.PR_COUNCIL), club)
        assert can_view_club_messages(caller(HEAD_ID, Role.CLUB_HEAD), club)
        assert can_view_club_messages(caller(MEMBER_ID, Role.STUDENT), club)
        assert not can_view_club_messages(caller(OTHER_HEAD_ID, Role.CLUB_HEAD), club)
        assert not can_view_club_messages(caller(OUTSIDER_ID, Role.STUDENT), club)

    def test_membership_helpers(self, club):
        assert is_member_of(caller(MEMBER_ID, Role.STUDENT), club)
        assert has_pending_request(caller(PENDING_ID, Role.STUDENT), club)
        assert not has_pending_request(caller(MEMBER_ID, Role.STUDENT), club)

    def test_missing_club(self):
        assert not can_manage_club(caller(HEAD_ID, Role.CLUB_HEAD), None)
        assert not can_view_club_detail(caller(MEMBER_ID, Role.STUDENT), None)


class TestEventPermissions:
    """행사 관리 권한 (주최 동아리 기준)"""

    def test_head_of_owning_club(self, club):
        event = {"_id": ObjectId(), "clubId": club["_id"]}
        assert can_manage_event(caller(HEAD_ID, Role.CLUB_HEAD), event, club)

    def test_other_head(self, club):
        event = {"_id": ObjectId(), "clubId": club["_id"]}
        assert not can_manage_event(caller(OTHER_HEAD_ID, Role.CLUB_HEAD), event, club)

    def test_club_mismatch(self, club):
        """넘겨받은 동아리가 행사 주최 동아리가 아니면 불가"""
        event = {"_id": ObjectId(), "clubId": ObjectId()}
        assert not can_manage_event(caller(HEAD_ID, Role.CLUB_HEAD), event, club)

    def test_pr_council(self, club):
        event = {"_id": ObjectId(), "clubId": ObjectId()}
        assert can_manage_event(caller(PR_ID, Role.PR_COUNCIL), event, None)

    def test_student(self, club):
        event = {"_id": ObjectId(), "clubId": club["_id"]}
        assert not can_manage_event(caller(MEMBER_ID, Role.STUDENT), event, club)
