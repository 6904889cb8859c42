"""
Tests for the server-rendered landing, registration and booking pages.
"""

from datetime import date, datetime, timedelta

from app.config import PENDING_USER_COOKIE, SESSION_COOKIE_NAME
from app.domain.auth.adapter import DatabaseAdapter
from app.domain.users import service as users_service
from app.models import Scheduling, User
from app.services.availability import week_day_of

from .conftest import add_interval

FUTURE_DAY = date.today() + timedelta(days=30)


class TestHome:
    def test_renders_hero_and_claim_form(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "<title>Descomplique sua agenda | Ignite Call</title>" in response.text
        assert "Agendamento descomplicado" in response.text
        assert 'action="/register"' in response.text
        assert "app-preview.svg" in response.text


class TestRegister:
    def test_prefills_username(self, client):
        response = client.get("/register", params={"username": "diego"})

        assert response.status_code == 200
        assert 'value="diego"' in response.text

    def test_claims_username_and_moves_on(self, client, db):
        response = client.post(
            "/register",
            data={"username": "diego", "name": "Diego Fernandes"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/register/connect-calendar"
        user = db.query(User).filter(User.username == "diego").one()
        assert response.headers["set-cookie"].startswith(f"{PENDING_USER_COOKIE}={user.id}")

    def test_taken_username_shows_error(self, client, pending_user):
        response = client.post(
            "/register", data={"username": "diego", "name": "Diego Fernandes"}, follow_redirects=False
        )

        assert response.status_code == 400
        assert "Username already taken." in response.text

    def test_invalid_username_shows_message(self, client):
        response = client.post(
            "/register", data={"username": "bad name", "name": "Diego Fernandes"}, follow_redirects=False
        )

        assert response.status_code == 400
        assert "O usuário pode ter apenas letras, números e hifens." in response.text

    def test_connect_calendar_signed_out(self, client):
        response = client.get("/register/connect-calendar", params={"error": "permissions"})

        assert response.status_code == 200
        assert 'href="/auth/signin/google"' in response.text
        assert "habilitou as permissões" in response.text

    def test_connect_calendar_signed_in(self, client, db, pending_user):
        DatabaseAdapter(db, {}).create_session(
            "token-1", pending_user.id, datetime.utcnow() + timedelta(days=30)
        )
        client.cookies.set(SESSION_COOKIE_NAME, "token-1")

        response = client.get("/register/connect-calendar")

        assert "Conectado" in response.text
        assert 'href="/schedule/diego"' in response.text


class TestCalendarStep:
    def test_unknown_user_is_404(self, client):
        assert client.get("/schedule/nobody").status_code == 404

    def test_month_without_selected_date(self, client, pending_user):
        response = client.get("/schedule/diego", params={"month": "2030-01"})

        assert response.status_code == 200
        assert "Janeiro <span>2030</span>" in response.text
        assert "time-picker-list" not in response.text

    def test_selected_date_lists_slots(self, client, db, pending_user):
        add_interval(db, pending_user, week_day=week_day_of(FUTURE_DAY), start_hour=10, end_hour=13)
        db.add(
            Scheduling(
                user_id=pending_user.id,
                date=datetime.combine(FUTURE_DAY, datetime.min.time()).replace(hour=11),
                name="Visitor",
                email="v@example.com",
            )
        )
        db.commit()

        response = client.get("/schedule/diego", params={"date": FUTURE_DAY.isoformat()})

        assert response.status_code == 200
        assert '<button class="time-picker-item" disabled>11:00h</button>' in response.text
        ten = datetime.combine(FUTURE_DAY, datetime.min.time()).replace(hour=10).isoformat()
        assert f'href="/schedule/diego/confirm?datetime={ten}">10:00h</a>' in response.text
        assert "12:00h" in response.text

    def test_months_past_the_last_supported_year_fall_back(self, client, pending_user):
        today = date.today()

        last = client.get("/schedule/diego", params={"month": "9999-11"})
        beyond = client.get("/schedule/diego", params={"month": "9999-12"})
        negative = client.get("/schedule/diego", params={"month": "-1-05"})

        assert last.status_code == 200
        assert "Novembro <span>9999</span>" in last.text
        assert beyond.status_code == 200
        assert f"<span>{today.year}</span>" in beyond.text
        assert negative.status_code == 200

    def test_selected_date_in_last_month_still_renders(self, client, pending_user):
        response = client.get("/schedule/diego", params={"date": "9999-12-31"})

        assert response.status_code == 200
        assert "31 de dezembro" in response.text

    def test_booked_banner(self, client, pending_user):
        response = client.get("/schedule/diego", params={"booked": "true"})

        assert "Agendamento realizado com sucesso!" in response.text


class TestConfirmStep:
    def _when(self):
        return datetime.combine(FUTURE_DAY, datetime.min.time()).replace(hour=10)

    def test_shows_selected_date_and_time(self, client, pending_user):
        response = client.get("/schedule/diego/confirm", params={"datetime": self._when().isoformat()})

        assert response.status_code == 200
        assert "10:00h" in response.text

    def test_books_and_returns_to_calendar(self, client, db, pending_user, monkeypatch):
        async def create_calendar_event(user, scheduling, db):
            return None

        monkeypatch.setattr(users_service, "create_calendar_event", create_calendar_event)

        response = client.post(
            "/schedule/diego/confirm",
            data={
                "datetime": self._when().isoformat(),
                "name": "Visitor",
                "email": "visitor@example.com",
                "observations": "",
            },
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/schedule/diego?booked=true"
        scheduling = db.query(Scheduling).one()
        assert scheduling.date == self._when()
        assert scheduling.observations is None

    def test_invalid_form_is_rendered_again(self, client, db, pending_user):
        response = client.post(
            "/schedule/diego/confirm",
            data={"datetime": self._when().isoformat(), "name": "Visitor", "email": "nope"},
        )

        assert response.status_code == 400
        assert 'value="Visitor"' in response.text
        assert db.query(Scheduling).count() == 0
