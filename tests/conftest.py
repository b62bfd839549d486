import pytest
from fastapi.testclient import TestClient

from employee_api.config import Settings
from employee_api.database import create_db_engine, create_session_factory, init_db
from employee_api.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'employees.db'}",
        upload_dir=str(tmp_path / "uploads"),
        app_env="production",
    )


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    init_db(engine)
    session = create_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_form():
    def _make(**overrides):
        form = {
            "id": "ABC1234",
            "name": "John Doe",
            "role": "Engineer",
            "gender": "Male",
            "dob": "1990-04-12",
            "location": "Chennai",
            "email": "john.doe@astrolitetech.com",
            "phone": "9876543210",
            "joinDate": "2020-06-01",
            "experience": "5",
            "skills": "Python, SQL",
            "achievement": "Employee of the month",
        }
        form.update(overrides)
        return form
    return _make
