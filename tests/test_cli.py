import contextlib
import json

import pytest
from click.testing import CliRunner

import tufo.clients
import tufo.db
from tufo.cli import cli
from tufo.db import Area, Climb

from openbeta_payloads import FakeOpenBetaClient, greenbelt_tree


@pytest.fixture
def runner(session_factory, monkeypatch):
    @contextlib.contextmanager
    def test_scope():
        session = session_factory()
        try:
            yield session
            session.commit()
        finally:
            session.close()

    monkeypatch.setattr(tufo.db, "session_scope", test_scope)
    return CliRunner()


def test_import_area(runner, session, monkeypatch):
    fake = FakeOpenBetaClient({"Barton Creek Greenbelt": [greenbelt_tree()]})
    monkeypatch.setattr(tufo.clients.OpenBetaClient, "from_settings", classmethod(lambda cls: contextlib.nullcontext(fake)))

    result = runner.invoke(cli, ["import-area", "Barton Creek Greenbelt", "--state", "Texas", "--strict"])

    assert result.exit_code == 0, result.output
    summary = json.loads(result.output[result.output.index("{"):])
    assert summary["climbs_imported"] == 2
    assert summary["climbs_skipped"] == 0
    assert session.query(Climb).count() == 2


def test_import_failure_exits_nonzero(runner, monkeypatch):
    fake = FakeOpenBetaClient({"Nowhere": RuntimeError("boom")})
    monkeypatch.setattr(tufo.clients.OpenBetaClient, "from_settings", classmethod(lambda cls: contextlib.nullcontext(fake)))

    result = runner.invoke(cli, ["import-area", "Nowhere"])

    assert result.exit_code == 1


def test_delete_missing_area(runner):
    result = runner.invoke(cli, ["delete-area", "Nowhere"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_reset_requires_confirmation(runner, session, greenbelt):
    aborted = runner.invoke(cli, ["reset"], input="n\n")
    assert aborted.exit_code == 1
    assert session.query(Area).count() == 2

    confirmed = runner.invoke(cli, ["reset", "--yes"])
    assert confirmed.exit_code == 0, confirmed.output
    session.expire_all()
    assert session.query(Area).count() == 0


def test_seed(runner):
    assert "Seeded." in runner.invoke(cli, ["seed"]).output
    assert "Already seeded." in runner.invoke(cli, ["seed"]).output
