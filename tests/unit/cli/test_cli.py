from click.testing import CliRunner

from manvsgod.cli import stats as stats_module
from manvsgod.cli.main import cli
from manvsgod.store.decisions import ScenarioDecision, SQLiteDecisionStore


START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_levels_list() -> None:
    result = CliRunner().invoke(cli, ["levels", "list"])
    assert result.exit_code == 0
    assert "785" in result.output
    assert "knight" in result.output


def test_levels_show() -> None:
    result = CliRunner().invoke(cli, ["levels", "show", "1"])
    assert result.exit_code == 0
    assert "Peasant Tom" in result.output
    assert "spare" in result.output


def test_levels_show_unknown_level_aborts() -> None:
    result = CliRunner().invoke(cli, ["levels", "show", "99"])
    assert result.exit_code == 1
    assert "Level not found: 99" in result.output


def test_rules_list() -> None:
    result = CliRunner().invoke(cli, ["rules", "list"])
    assert result.exit_code == 0
    assert "betting-minimum" in result.output
    assert "gods-authority" in result.output


def test_rules_simulate_evolves_betting_minimum() -> None:
    result = CliRunner().invoke(cli, ["rules", "simulate", "--decisions", "7", "--bet", "80", "--seed", "3"])
    assert result.exit_code == 0
    assert "Evolutions" in result.output
    assert "betting-minimum" in result.output
    assert "68" in result.output


def test_rules_simulate_without_evolution() -> None:
    result = CliRunner().invoke(cli, ["rules", "simulate", "--decisions", "3", "--interval-hours", "1"])
    assert result.exit_code == 0
    assert "No rule evolved" in result.output


def test_chess_moves() -> None:
    result = CliRunner().invoke(cli, ["chess", "moves", START_FEN, "e2"])
    assert result.exit_code == 0
    assert "e2e3" in result.output


def test_chess_moves_on_empty_square() -> None:
    result = CliRunner().invoke(cli, ["chess", "moves", START_FEN, "e4"])
    assert result.exit_code == 0
    assert "No piece on e4" in result.output


def test_chess_board() -> None:
    result = CliRunner().invoke(cli, ["chess", "board", START_FEN])
    assert result.exit_code == 0
    assert "Material balance: 0" in result.output


def test_stats_reads_local_store(config, monkeypatch) -> None:
    store = SQLiteDecisionStore(config.local_store_path)
    store.append(ScenarioDecision(scenario_id=2, choice=0))
    store.append(ScenarioDecision(scenario_id=2, choice=1))
    monkeypatch.setattr(stats_module, "get_config", lambda: config)

    result = CliRunner().invoke(cli, ["stats", "--scenario", "2"])
    assert result.exit_code == 0
    assert "sqlite" in result.output
    assert "1 (50%)" in result.output


def test_stats_with_empty_store(config, monkeypatch) -> None:
    monkeypatch.setattr(stats_module, "get_config", lambda: config)

    result = CliRunner().invoke(cli, ["stats"])
    assert result.exit_code == 0
    assert "No decisions recorded" in result.output
