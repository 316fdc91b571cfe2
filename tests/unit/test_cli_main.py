"""Tests for shopcloud.cli.main — CLI commands via Click test runner."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from shopcloud.cli.main import cli
from shopcloud.shop import ShopCloud

SHOP_ID = "A2DE537C"
SECRET = "sk_61c394cf3346077b"
CREDENTIALS = ["--shop-id", SHOP_ID, "--secret", SECRET]

VALID_PAYLOAD = {
    "user_data": {"id": "1", "name": "Emmett Brown", "email": "ebrown@time.com", "country": "USA"},
    "group_data": {"name": "Marty McFly"},
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def payload_file(tmp_path: Path) -> Path:
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(VALID_PAYLOAD), encoding="utf-8")
    return path


@pytest.fixture()
def invalid_payload_file(tmp_path: Path) -> Path:
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps({"user_data": {}}), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Root CLI
# ---------------------------------------------------------------------------


class TestRootCLI:
    def test_help_exits_zero(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0

    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "shopcloud" in result.output.lower()


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidateCommand:
    def test_valid_payload(self, runner: CliRunner, payload_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(payload_file)])
        assert result.exit_code == 0
        assert "valid" in result.output.lower()

    def test_invalid_payload_lists_errors(
        self, runner: CliRunner, invalid_payload_file: Path
    ) -> None:
        result = runner.invoke(cli, ["validate", str(invalid_payload_file)])
        assert result.exit_code == 1
        assert "user_data" in result.output
        assert "4 error(s)" in result.output

    def test_invalid_json(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_reads_stdin(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["validate", "-"], input=json.dumps(VALID_PAYLOAD))
        assert result.exit_code == 0

    def test_country_option_restricts_countries(
        self, runner: CliRunner, payload_file: Path
    ) -> None:
        result = runner.invoke(cli, ["validate", str(payload_file), "--country", "GBR"])
        assert result.exit_code == 1
        assert "GBR" in result.output

    def test_country_option_is_repeatable(self, runner: CliRunner, payload_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(payload_file), "-c", "GBR", "-c", "USA"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# token issue / read
# ---------------------------------------------------------------------------


class TestTokenCommands:
    def test_issue_prints_token(self, runner: CliRunner, payload_file: Path) -> None:
        result = runner.invoke(cli, ["token", *CREDENTIALS, "issue", str(payload_file)])
        assert result.exit_code == 0
        token = result.output.strip()
        assert token.endswith("@" + SHOP_ID)
        assert ShopCloud(SHOP_ID, SECRET).read_token(token) == VALID_PAYLOAD

    def test_issue_writes_output_file(
        self, runner: CliRunner, payload_file: Path, tmp_path: Path
    ) -> None:
        output = tmp_path / "token.txt"
        result = runner.invoke(
            cli, ["token", *CREDENTIALS, "issue", str(payload_file), "--output", str(output)]
        )
        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8").strip().endswith("@" + SHOP_ID)

    def test_issue_rejects_invalid_payload(
        self, runner: CliRunner, invalid_payload_file: Path
    ) -> None:
        result = runner.invoke(cli, ["token", *CREDENTIALS, "issue", str(invalid_payload_file)])
        assert result.exit_code == 1
        assert "user_data" in result.output

    def test_credentials_from_environment(self, runner: CliRunner, payload_file: Path) -> None:
        result = runner.invoke(
            cli,
            ["token", "issue", str(payload_file)],
            env={"SHOPCLOUD_SHOP_ID": SHOP_ID, "SHOPCLOUD_SECRET": SECRET},
        )
        assert result.exit_code == 0
        assert result.output.strip().endswith("@" + SHOP_ID)

    def test_missing_credentials(self, runner: CliRunner, payload_file: Path) -> None:
        result = runner.invoke(
            cli,
            ["token", "issue", str(payload_file)],
            env={"SHOPCLOUD_SHOP_ID": "", "SHOPCLOUD_SECRET": ""},
        )
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_bad_secret(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["token", "--shop-id", SHOP_ID, "--secret", "sk_x", "partner"])
        assert result.exit_code == 1
        assert "Secret" in result.output

    def test_partner_then_read(self, runner: CliRunner) -> None:
        issued = runner.invoke(cli, ["token", *CREDENTIALS, "partner"])
        assert issued.exit_code == 0
        result = runner.invoke(cli, ["token", *CREDENTIALS, "read", issued.output.strip()])
        assert result.exit_code == 0
        assert json.loads(result.output)["type"] == "partner"

    def test_read_rejects_other_shop(self, runner: CliRunner) -> None:
        token = ShopCloud("B7F00D11", SECRET).get_partner_token()
        result = runner.invoke(cli, ["token", *CREDENTIALS, "read", token])
        assert result.exit_code == 1
        assert "B7F00D11" in result.output

    def test_read_with_non_numeric_expiry(self, runner: CliRunner) -> None:
        token = ShopCloud(SHOP_ID, SECRET).identified_token(
            {**VALID_PAYLOAD, "expires": "2030-01-01"}
        )
        result = runner.invoke(cli, ["token", *CREDENTIALS, "read", token])
        assert result.exit_code == 0
        assert result.exception is None
        assert json.loads(result.output)["expires"] == "2030-01-01"

    def test_issue_and_validate_share_country_option(
        self, runner: CliRunner, payload_file: Path
    ) -> None:
        validated = runner.invoke(cli, ["validate", str(payload_file), "-c", "GBR"])
        issued = runner.invoke(
            cli, ["token", *CREDENTIALS, "-c", "GBR", "issue", str(payload_file)]
        )
        assert validated.exit_code == issued.exit_code == 1

        issued = runner.invoke(
            cli, ["token", *CREDENTIALS, "-c", "USA", "issue", str(payload_file)]
        )
        assert issued.exit_code == 0

    def test_audit_log_option(self, runner: CliRunner, tmp_path: Path) -> None:
        audit_log = tmp_path / "audit.jsonl"
        result = runner.invoke(
            cli, ["token", *CREDENTIALS, "--audit-log", str(audit_log), "partner"]
        )
        assert result.exit_code == 0
        event = json.loads(audit_log.read_text(encoding="utf-8").splitlines()[0])
        assert event["event_type"] == "partner_token_issued"


# ---------------------------------------------------------------------------
# token inspect
# ---------------------------------------------------------------------------


class TestInspectCommand:
    def test_shows_shop_id_and_header(self, runner: CliRunner) -> None:
        token = ShopCloud(SHOP_ID, SECRET).get_partner_token()
        result = runner.invoke(cli, ["token", "inspect", token])
        assert result.exit_code == 0
        assert SHOP_ID in result.output
        assert "A128GCM" in result.output

    def test_needs_no_credentials(self, runner: CliRunner) -> None:
        token = ShopCloud("B7F00D11", SECRET).get_partner_token()
        result = runner.invoke(cli, ["token", "inspect", token], env={"SHOPCLOUD_SECRET": ""})
        assert result.exit_code == 0
        assert "B7F00D11" in result.output

    def test_malformed_token(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["token", "inspect", "no-separator"])
        assert result.exit_code == 1
