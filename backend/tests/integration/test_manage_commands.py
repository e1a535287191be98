"""
Integration tests for the management CLI.
"""

import pytest
from click.testing import CliRunner

import manage
from barbershop.db.seed import SAMPLE_BARBERS, SAMPLE_SERVICES
from tests.conftest import BARBER_ONE_ID, TEST_DAY


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.integration
class TestManageCommands:
    def test_seed_is_idempotent(self, runner, db_session):
        first = runner.invoke(manage.cli, ["seed"])
        second = runner.invoke(manage.cli, ["seed"])

        assert first.exit_code == 0, first.output
        assert second.exit_code == 0, second.output
        assert manage.seed_sample_data() == (0, 0)
        assert len(SAMPLE_BARBERS) == 4
        assert len(SAMPLE_SERVICES) == 5

    def test_slots_lists_free_times(self, runner, seeded_catalog):
        result = runner.invoke(
            manage.cli,
            ["slots", BARBER_ONE_ID, TEST_DAY.date().isoformat(), "--duration", "60"],
        )

        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert lines[0] == "08:00 - 09:00"
        assert lines[-1] == "19:45 - 20:45"

    def test_slots_rejects_bad_barber(self, runner, db_session):
        result = runner.invoke(manage.cli, ["slots", "undefined", "2030-06-10"])

        assert result.exit_code != 0
        assert "barber_id" in result.output
