from typer.testing import CliRunner

from healthguard.cli.main import app


runner = CliRunner()


def _env(tmp_path) -> dict[str, str]:
    return {
        "ORACLE_BACKEND": "stub",
        "VILLAGE_STORE_PATH": str(tmp_path / "villages.json"),
        "LOG_LEVEL": "WARNING",
    }


def test_villages_list_shows_seed(tmp_path):
    result = runner.invoke(app, ["villages", "list"], env=_env(tmp_path))
    assert result.exit_code == 0
    assert "Cheepurupalli" in result.output


def test_report_submit_updates_village(tmp_path):
    env = _env(tmp_path)
    result = runner.invoke(
        app,
        [
            "report", "submit",
            "--worker", "Lakshmi",
            "--village", "Bobbili",
            "--symptoms", "Rash, Fever",
            "--affected", "4",
            "--sanitation", "Worst",
        ],
        env=env,
    )
    assert result.exit_code == 0
    assert "cases=19" in result.output

    shown = runner.invoke(app, ["villages", "show", "bobbili"], env=env)
    assert "Rash" in shown.output
    assert "reporter: Lakshmi" in shown.output


def test_report_submit_new_village_without_location_fails(tmp_path):
    result = runner.invoke(
        app,
        ["report", "submit", "--worker", "L", "--village", "Nowhere", "--symptoms", "Fever", "--affected", "1"],
        env=_env(tmp_path),
    )
    assert result.exit_code == 1


def test_comment_and_stats(tmp_path):
    env = _env(tmp_path)
    assert runner.invoke(app, ["villages", "comment", "v2", "--text", "Need ORS"], env=env).exit_code == 0
    assert runner.invoke(app, ["villages", "comment", "zzz", "--text", "Need ORS"], env=env).exit_code == 1

    stats = runner.invoke(app, ["villages", "stats"], env=env)
    assert "total active cases: 70" in stats.output
    assert "red zones: 1" in stats.output


def test_clusters_list_without_clusters(tmp_path):
    result = runner.invoke(app, ["clusters", "list"], env=_env(tmp_path))
    assert result.exit_code == 0
    assert "No active outbreak clusters." in result.output


def test_read_only_commands_work_without_api_key(tmp_path):
    env = {**_env(tmp_path), "ORACLE_BACKEND": "gemini", "GOOGLE_API_KEY": ""}
    assert runner.invoke(app, ["villages", "list"], env=env).exit_code == 0
    shown = runner.invoke(app, ["villages", "show", "v3"], env=env)
    assert shown.exit_code == 0
    assert "Cheepurupalli" in shown.output
    assert "villages: 4" in runner.invoke(app, ["villages", "stats"], env=env).output
