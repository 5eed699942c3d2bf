import pytest

from app import create_app
from pwcheck.config import Settings
from pwcheck.dictionary import DictionaryStore
from pwcheck.evaluator import PasswordEvaluator

COMMON_PASSWORDS = [
    "password",
    "password123",
    "qwerty",
    "letmein",
    "dragon",
    "sunshine",
    "monkey",
    "welcome",
    "admin",
    "123456",
    "iloveyou123",
]


@pytest.fixture
def store():
    return DictionaryStore.from_entries(COMMON_PASSWORDS, source="test")


@pytest.fixture
def evaluator(store):
    return PasswordEvaluator(store)


@pytest.fixture
def corpus_file(tmp_path):
    path = tmp_path / "passwords.csv"
    lines = ["id,password"]
    lines += [f'{i},"{pw}"' for i, pw in enumerate(COMMON_PASSWORDS, start=1)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def app(corpus_file):
    app = create_app(Settings(dictionary_path=str(corpus_file), log_level="WARNING"))
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
