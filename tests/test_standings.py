"""BDD tests for league standings."""

import pytest
from pytest_bdd import scenarios, given, when, then, parsers

from footy_league_mcp.ranking import rank
from footy_league_mcp.stats import aggregate

from conftest import make_match, stats

# Load scenarios from feature file
scenarios("standings.feature")


def _ids(text):
    return [p.strip() for p in text.split(",") if p.strip()]


@pytest.fixture
def context():
    """Shared context for test steps."""
    return {"matches": [], "roster": None, "aggregates": {}, "table": []}


@given("an empty match log")
def empty_match_log(context):
    context["matches"] = []


@given(parsers.parse('a match "{match_id}" where "{team_a}" play "{team_b}" ending {goals_a:d}-{goals_b:d}'))
def add_match(context, match_id, team_a, team_b, goals_a, goals_b):
    context["matches"].append(make_match(match_id, _ids(team_a), _ids(team_b), goals_a, goals_b))


@given(parsers.parse(
    'a match "{match_id}" where "{team_a}" play "{team_b}" ending {goals_a:d}-{goals_b:d} with MVP "{mvp}"'
))
def add_match_with_mvp(context, match_id, team_a, team_b, goals_a, goals_b, mvp):
    context["matches"].append(
        make_match(match_id, _ids(team_a), _ids(team_b), goals_a, goals_b, mvp=mvp)
    )


@given(parsers.parse('a roster of "{player_ids}"'))
def roster(context, player_ids):
    context["roster"] = _ids(player_ids)


@given(parsers.parse('player "{player_id}" with {wins:d} wins, {draws:d} draws and {losses:d} losses'))
def player_with_record(context, player_id, wins, draws, losses):
    context["aggregates"][player_id] = stats(wins, draws, losses)


@given(parsers.parse(
    'player "{player_id}" with {wins:d} wins, {draws:d} draws and {losses:d} losses '
    'and goal difference {gd}'
))
def player_with_record_and_gd(context, player_id, wins, draws, losses, gd):
    context["aggregates"][player_id] = stats(wins, draws, losses, gd=int(gd))


@given("the sample league")
def sample_league(context, league_service):
    context["service"] = league_service


@when("I aggregate the match log")
def aggregate_log(context):
    context["aggregates"] = aggregate(context["matches"], context["roster"])


@when("I rank the players")
def rank_players(context):
    context["table"] = rank(context["aggregates"].items())


@when("I ask for the standings")
def ask_standings(context):
    context["table"] = context["service"].standings()


@when(parsers.parse('I ask for the standings sorted by "{column}"'))
def ask_sorted_standings(context, column):
    context["table"] = context["service"].standings(sort_by=column)


@then(parsers.parse('player "{player_id}" has {wins:d} wins, {draws:d} draws and {losses:d} losses'))
def check_record(context, player_id, wins, draws, losses):
    row = context["aggregates"][player_id]
    assert (row.wins, row.draws, row.losses) == (wins, draws, losses)


@then(parsers.parse('player "{player_id}" has {points:d} points and goal difference {gd}'))
def check_points(context, player_id, points, gd):
    row = context["aggregates"][player_id]
    assert row.points == points
    assert row.goal_difference == int(gd)


@then(parsers.parse('player "{player_id}" has {count:d} MVP awards'))
def check_mvp(context, player_id, count):
    assert context["aggregates"][player_id].mvp_awards == count


@then(parsers.parse('player "{player_id}" does not appear in the standings'))
def check_absent(context, player_id):
    assert player_id not in context["aggregates"]


@then(parsers.parse('the standings order is "{order}"'))
def check_order(context, order):
    assert [player_id for player_id, _ in context["table"]] == _ids(order)


@then(parsers.parse('the first {count:d} players are "{order}"'))
def check_leaders(context, count, order):
    assert [player_id for player_id, _ in context["table"][:count]] == _ids(order)
