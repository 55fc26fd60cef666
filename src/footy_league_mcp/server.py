"""MCP Server for the footy league standings, badges and pitch-cost ledger."""

import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent

from .badges import BADGES, all_badge_names, categorize_badges
from .config import get_settings
from .database import Neo4jDatabase
from .debt import debt_totals
from .models import Signup
from .ranking import SORT_KEYS
from .repository import LeagueRepository
from .service import LeagueService

logger = logging.getLogger(__name__)

# Initialize the server
server = FastMCP("footy-league")

# Service (lazy initialization)
_service: Optional[LeagueService] = None


def get_service() -> LeagueService:
    """Get or create the league service."""
    global _service
    if _service is None:
        db = Neo4jDatabase()
        db.connect()
        logger.info("League service ready")
        _service = LeagueService(LeagueRepository(db))
    return _service


def _text(output: str) -> list[TextContent]:
    return [TextContent(type="text", text=output)]


# ============================================================================
# Standings Tools
# ============================================================================


@server.tool()
async def get_standings(
    sort_by: Optional[str] = None, descending: bool = True, limit: int = 50
) -> list[TextContent]:
    """Get the league table.

    Args:
        sort_by: Optional single column to re-sort by (points, mvp_awards,
            games_played, goal_difference, points_per_game, win_percentage).
            Omit for the official order: points, then points per game, then
            goal difference.
        descending: Sort direction (default highest first)
        limit: Maximum number of rows to return (default 50)
    """
    if sort_by is not None and sort_by not in SORT_KEYS:
        return _text(f"Unknown sort column '{sort_by}'. Use one of: {', '.join(SORT_KEYS)}")

    service = get_service()
    table = service.standings(sort_by=sort_by, descending=descending)

    if not table:
        return _text("No players in the league yet")

    output = "**League Standings**"
    if sort_by:
        output += f" (sorted by {sort_by})"
    output += "\n\n"
    for position, (player_id, stats) in enumerate(table[:limit], 1):
        output += (
            f"{position}. {service.player_name(player_id)} - {stats.points} pts "
            f"(P{stats.games_played} W{stats.wins} D{stats.draws} L{stats.losses}, "
            f"GD {stats.goal_difference:+d}, PPG {stats.points_per_game:.1f}, "
            f"MVP {stats.mvp_awards})\n"
        )

    return _text(output)


@server.tool()
async def get_player_stats(player_id: str) -> list[TextContent]:
    """Get statistics for a specific player.

    Args:
        player_id: The unique player identifier
    """
    card = get_service().player_card(player_id)

    if card is None:
        return _text(f"Player with ID '{player_id}' not found")

    stats = card.aggregate
    output = f"**{card.player.name}** Statistics\n\n"
    output += f"- Games Played: {stats.games_played}\n"
    output += f"- Wins: {stats.wins}\n"
    output += f"- Draws: {stats.draws}\n"
    output += f"- Losses: {stats.losses}\n"
    output += f"- Points: {stats.points}\n"
    output += f"- Points Per Game: {stats.points_per_game:.1f}\n"
    output += f"- Win Rate: {stats.win_percentage:.1f}%\n"
    output += f"- Goal Difference: {stats.goal_difference:+d}\n"
    output += f"- MVP Awards: {stats.mvp_awards}\n"
    if card.recent_results:
        output += f"- Recent Form: {' '.join(r[0].upper() for r in card.recent_results)}\n"

    return _text(output)


# ============================================================================
# Badge Tools
# ============================================================================


@server.tool()
async def get_player_badges(player_id: str) -> list[TextContent]:
    """Get the achievement badges a player has earned.

    Args:
        player_id: The unique player identifier
    """
    card = get_service().player_card(player_id)

    if card is None:
        return _text(f"Player with ID '{player_id}' not found")

    output = f"**{card.player.name}** Badges\n\n"
    if not card.badges:
        output += "No badges earned yet."
    else:
        for badge in card.badges:
            output += f"- {badge.icon} **{badge.name}**: {badge.description}\n"

    return _text(output)


@server.tool()
async def get_badge_guide() -> list[TextContent]:
    """List every badge that can be earned, grouped by category."""
    catalogue = [BADGES[name] for name in all_badge_names()]

    output = "**Badge Guide**\n"
    for category, badges in categorize_badges(catalogue).items():
        output += f"\n**{category}**\n"
        for badge in badges:
            output += f"- {badge.icon} {badge.name}: {badge.description}\n"

    return _text(output)


# ============================================================================
# Debt Tools
# ============================================================================


@server.tool()
async def get_player_debt(participant_id: str) -> list[TextContent]:
    """Get how much a player or guest owes for pitch hire.

    Args:
        participant_id: A player or guest identifier
    """
    service = get_service()
    guest_ids = {g.guest_id for g in service.repository.list_guests()}

    if participant_id in guest_ids:
        debt = service.guest_debt_for(participant_id)
    else:
        debt = service.debt_for(participant_id)

    return _text(f"**{participant_id}** owes £{debt:.2f} across all scheduled games")


@server.tool()
async def get_debt_report() -> list[TextContent]:
    """Get the pitch-cost ledger for everyone who owes, most indebted first."""
    summaries = get_service().debt_report()

    if not summaries:
        return _text("Nobody owes anything")

    output = "**Debt Report**\n\n"
    for summary in summaries:
        kind = "guest" if summary.is_guest else ("verified" if summary.is_verified else "player")
        dropouts = sum(1 for line in summary.lines if line.is_dropout)
        output += (
            f"- **{summary.name}** ({kind}): {len(summary.lines)} game(s), "
            f"debt £{summary.total_debt:.2f}, credit £{summary.credit:.2f}, "
            f"balance £{summary.net_balance:.2f}"
        )
        if dropouts:
            output += f" [{dropouts} late dropout(s)]"
        output += "\n"

    totals = debt_totals(summaries)
    output += (
        f"\nTotals: debt £{totals['debt']:.2f}, credit £{totals['credit']:.2f}, "
        f"balance £{totals['net_balance']:.2f}\n"
    )

    return _text(output)


# ============================================================================
# Schedule Tools
# ============================================================================


@server.tool()
async def get_game_lineup(game_id: str) -> list[TextContent]:
    """Get who is playing and who is on the waitlist for a scheduled game.

    Args:
        game_id: The scheduled game identifier
    """
    service = get_service()
    lineup = service.lineup(game_id)

    if lineup is None:
        return _text(f"Game with ID '{game_id}' not found")

    guests = {g.guest_id: g.name for g in service.repository.list_guests()}

    def name_of(signup: Signup) -> str:
        if not signup.is_guest:
            return service.player_name(signup.player_id)
        return f"{guests.get(signup.guest_id) or signup.guest_name or 'Unknown Guest'} (guest)"

    game = lineup.game
    pitch = {"small": "Small pitch", "big": "Big pitch"}.get(game.pitch_size, "Pitch TBD")

    output = f"**Game {game.game_id}** - {game.scheduled_at:%A %d %b %H:%M}\n\n"
    output += f"- {pitch}\n"
    output += f"- Signed up: {lineup.signup_count}/{lineup.capacity}\n"
    if lineup.is_full:
        output += "- Full\n"
    else:
        output += f"- {lineup.spots_needed} more needed\n"

    if lineup.playing:
        output += "\n**Playing:**\n"
        for position, signup in enumerate(lineup.playing, 1):
            output += f"{position}. {name_of(signup)}\n"
    else:
        output += "\nNo players signed up yet\n"

    if lineup.waitlist:
        output += "\n**Waitlist:**\n"
        for position, signup in enumerate(lineup.waitlist, 1):
            output += f"{position}. {name_of(signup)}\n"

    return _text(output)


def main():
    """Run the MCP server over stdio."""
    logging.basicConfig(
        level=get_settings().log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    server.run()


if __name__ == "__main__":
    main()
