"""BDD tests for the pitch-cost ledger and game lineups."""

from dataclasses import replace
from datetime import timedelta

import pytest
from pytest_bdd import scenarios, given, when, then, parsers

from footy_league_mcp.debt import debt_for, summarize_debts
from footy_league_mcp.models import ScheduledGame, Signup

# Load scenarios from feature file
scenarios("debt.feature")


def _participant(number: int) -> str:
    return f"X{number:02d}"


@pytest.fixture
def context():
    """Shared context for test steps."""
    return {"games": [], "signups": [], "debts": {}, "report": [], "answer": None}


@given(parsers.parse('a "{pitch}" game "{game_id}" with {count:d} signups'))
def game_with_signups(context, kickoff, pitch, game_id, count):
    game = ScheduledGame(game_id, kickoff, None if pitch == "none" else pitch)
    context["games"].append(game)
    opened = kickoff - timedelta(days=6)
    context["signups"].extend(
        Signup(
            f"{game_id}-{n}",
            game_id,
            opened + timedelta(minutes=n),
            player_id=_participant(n),
        )
        for n in range(1, count + 1)
    )


@given(parsers.parse("participant {number:d} dropped out at the last minute"))
def dropped_out(context, number):
    context["signups"] = [
        replace(s, last_minute_dropout=True) if s.player_id == _participant(number) else s
        for s in context["signups"]
    ]


@given("the sample league")
def sample_league(context, league_service):
    context["service"] = league_service


def _debts(context):
    return {
        s.player_id: debt_for(s.player_id, context["games"], context["signups"])
        for s in context["signups"]
    }


@when("I work out each participant's debt")
def work_out_debts(context):
    context["debts"] = _debts(context)


@when("I build the debt report")
def build_report(context):
    context["debts"] = _debts(context)
    context["report"] = summarize_debts(context["games"], context["signups"])


@when(parsers.parse('I ask what "{participant_id}" owes'))
def ask_player_debt(context, participant_id):
    context["answer"] = context["service"].debt_for(participant_id)


@when(parsers.parse('I ask what guest "{guest_id}" owes'))
def ask_guest_debt(context, guest_id):
    context["answer"] = context["service"].guest_debt_for(guest_id)


@when("I ask for the debt report")
def ask_report(context):
    context["report"] = context["service"].debt_report()


@when(parsers.parse('I ask for the lineup of "{game_id}"'))
def ask_lineup(context, game_id):
    context["lineup"] = context["service"].lineup(game_id)


@then(parsers.parse("every participant owes {amount:f}"))
def check_everyone_owes(context, amount):
    assert context["debts"]
    for participant_id, debt in context["debts"].items():
        assert debt == pytest.approx(amount, abs=0.005), participant_id


@then(parsers.parse("participant {number:d} owes {amount:f}"))
def check_participant_owes(context, number, amount):
    assert context["debts"][_participant(number)] == pytest.approx(amount, abs=0.005)


@then(parsers.parse("the report charges participant {number:d} {amount:f}"))
def check_report_charge(context, number, amount):
    summary = next(s for s in context["report"] if s.participant_id == _participant(number))
    assert summary.total_debt == pytest.approx(amount, abs=0.005)
    assert summary.lines[0].is_dropout


@then(parsers.parse("the report does not list participant {number:d}"))
def check_not_listed(context, number):
    assert _participant(number) not in {s.participant_id for s in context["report"]}


@then(parsers.parse("the answer is {amount:f}"))
def check_answer(context, amount):
    assert context["answer"] == pytest.approx(amount, abs=0.005)


@then(parsers.parse('the report starts with "{names}"'))
def check_report_start(context, names):
    expected = names.split(",")
    assert [s.name for s in context["report"][: len(expected)]] == expected


@then(parsers.parse('the report ends with "{names}"'))
def check_report_end(context, names):
    expected = names.split(",")
    assert [s.name for s in context["report"][-len(expected):]] == expected


@then(parsers.parse('the report does not mention "{name}"'))
def check_report_omits(context, name):
    assert name not in {s.name for s in context["report"]}


@then(parsers.parse("{count:d} are playing"))
def check_playing(context, count):
    assert len(context["lineup"].playing) == count


@then(parsers.parse('the waitlist is "{names}"'))
def check_waitlist(context, names):
    assert [s.guest_name for s in context["lineup"].waitlist] == names.split(",")


@then("the game is full")
def check_full(context):
    assert context["lineup"].is_full


@then(parsers.parse("{count:d} more players are needed"))
def check_spots(context, count):
    assert not context["lineup"].is_full
    assert context["lineup"].spots_needed == count
