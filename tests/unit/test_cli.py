import json
from uuid import uuid4

import pytest

from src.adapters.sqlite.repos import SQLiteArticleRepo
from src.app_shell.cli import build_parser, main


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.setenv("EDITORIAL_GATE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("EDITORIAL_GATE_WEBHOOK_STAGING", "https://hooks.example.test/staging")
    monkeypatch.delenv("EDITORIAL_GATE_RULES", raising=False)
    monkeypatch.delenv("EDITORIAL_GATE_WEBHOOK_PRODUCTION", raising=False)
    monkeypatch.delenv("EDITORIAL_GATE_HTTP_TIMEOUT", raising=False)
    return tmp_path


def test_parser_publish_flags():
    article_id = uuid4()
    args = build_parser().parse_args(
        ["publish", str(article_id), "--env", "production", "--status", "publish", "--skip-validation"]
    )
    assert args.article_id == article_id
    assert args.env == "production"
    assert args.status == "publish"
    assert args.skip_validation is True


def test_parser_rejects_bad_env():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["publish", str(uuid4()), "--env", "qa"])


def test_init_db(env, capsys):
    assert main(["init-db"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["applied"] == ["001_initial.sql", "002_auto_publish.sql"]


def test_validate_prints_verdict(env, capsys, make_article):
    main(["init-db"])
    capsys.readouterr()
    article = make_article(author=None)
    SQLiteArticleRepo(str(env / "editorial_gate.db")).save(article)

    code = main(["validate", str(article.id)])

    out = json.loads(capsys.readouterr().out)
    assert code == 1
    assert out["can_publish"] is False
    assert out["verdict"]["blocking_issues"][0]["kind"] == "no_author"


def test_validate_unknown_article(env):
    main(["init-db"])
    assert main(["validate", str(uuid4())]) == 1


def test_init_db_pending_and_rollback(env, capsys):
    assert main(["init-db", "--pending"]) == 0
    assert json.loads(capsys.readouterr().out)["pending"] == [
        "001_initial.sql",
        "002_auto_publish.sql",
    ]

    main(["init-db"])
    capsys.readouterr()
    assert main(["init-db", "--rollback"]) == 0
    assert json.loads(capsys.readouterr().out)["rolled_back"] == "002_auto_publish.sql"

    assert main(["init-db", "--pending"]) == 0
    assert json.loads(capsys.readouterr().out)["pending"] == ["002_auto_publish.sql"]


def test_schedule_sets_deadline(env, capsys, make_article):
    main(["init-db"])
    capsys.readouterr()
    repo = SQLiteArticleRepo(str(env / "editorial_gate.db"))
    article = repo.save(make_article())

    assert main(["schedule", str(article.id)]) == 0

    stored = repo.get_by_id(article.id)
    assert stored.status == "ready_to_publish"
    assert stored.autopublish_deadline is not None
    assert (stored.autopublish_deadline - stored.updated_at).days == 5

    assert main(["schedule", str(article.id), "--cancel"]) == 0
    assert repo.get_by_id(article.id).autopublish_deadline is None


def test_review_marks_article(env, capsys, make_article):
    main(["init-db"])
    capsys.readouterr()
    repo = SQLiteArticleRepo(str(env / "editorial_gate.db"))
    article = repo.save(make_article())

    assert main(["review", str(article.id)]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["human_reviewed"] is True
    assert repo.get_by_id(article.id).human_reviewed is True


def test_schedule_unknown_article(env):
    main(["init-db"])
    assert main(["schedule", str(uuid4())]) == 1
