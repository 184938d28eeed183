"""
Tests for the HR dashboard.
"""

from datetime import datetime, timedelta

from recruitflow.models.cv_application import ApplicationStatus
from recruitflow.models.job_position import JobPositionStatus
from conftest import create_application, create_position


class TestSummary:
    """Test GET /api/hr/dashboard/summary"""

    def test_counts(self, client, db_session, manager_headers):
        position = create_position(db_session)
        create_position(db_session, name="Draft Role", status=JobPositionStatus.DRAFT)

        statuses = [
            ApplicationStatus.SUBMITTED,
            ApplicationStatus.REVIEWED,
            ApplicationStatus.HIRED,
            ApplicationStatus.ONBOARDING,
            ApplicationStatus.STAFF_REJECTED,
            ApplicationStatus.INTERVIEW_SCHEDULED,
        ]
        for i, status in enumerate(statuses):
            create_application(db_session, position=position, email=f"c{i}@example.com", status=status)
        create_application(db_session, position=position, email="old@example.com",
                           status=ApplicationStatus.NOT_HIRED, is_archived=True,
                           created_at=datetime.utcnow() - timedelta(days=3))

        response = client.get("/api/hr/dashboard/summary", headers=manager_headers)

        assert response.status_code == 200
        assert response.json() == {
            "total_cv_count": 7,
            "new_cv_last_24_hours": 6,
            "need_review_count": 2,
            "accepted_cv_count": 2,
            "rejected_cv_count": 1,
            "active_positions_count": 1,
        }

    def test_empty(self, client, staff_headers):
        response = client.get("/api/hr/dashboard/summary", headers=staff_headers)

        assert response.status_code == 200
        assert all(value == 0 for value in response.json().values())


class TestCharts:
    """Test GET /api/hr/dashboard/charts"""

    def test_distributions_and_trend(self, client, db_session, staff_headers):
        position = create_position(db_session)
        create_position(db_session, name="Closed Role", status=JobPositionStatus.CLOSED)
        create_application(db_session, position=position, email="a@example.com")
        create_application(db_session, position=position, email="b@example.com",
                           status=ApplicationStatus.REVIEWED,
                           created_at=datetime.utcnow() - timedelta(days=2))

        response = client.get("/api/hr/dashboard/charts", headers=staff_headers)

        assert response.status_code == 200
        data = response.json()

        assert data["job_distribution"]["OPEN"] == 1
        assert data["job_distribution"]["CLOSED"] == 1
        assert data["job_distribution"]["DRAFT"] == 0

        assert set(data["status_distribution"]) == {s.value for s in ApplicationStatus}
        assert data["status_distribution"]["SUBMITTED"] == 1
        assert data["status_distribution"]["REVIEWED"] == 1

        trend = data["weekly_submission_trend"]
        assert len(trend) == 8
        assert trend[-1]["date"] == datetime.utcnow().date().isoformat()
        assert trend[-1]["count"] == 1
        assert trend[-3]["count"] == 1
        assert sum(point["count"] for point in trend) == 2


class TestRecentApplications:

    def test_newest_first(self, client, db_session, staff_headers):
        now = datetime.utcnow()
        for i in range(3):
            create_application(db_session, email=f"c{i}@example.com", full_name=f"Candidate {i}",
                               created_at=now - timedelta(hours=3 - i))

        response = client.get("/api/hr/dashboard/recent-applications", headers=staff_headers, params={"limit": 2})

        assert response.status_code == 200
        assert [a["full_name"] for a in response.json()] == ["Candidate 2", "Candidate 1"]

    def test_limit_must_be_positive(self, client, staff_headers):
        response = client.get("/api/hr/dashboard/recent-applications", headers=staff_headers, params={"limit": 0})
        assert response.status_code == 422
