"""Board, board member and connection tools."""

from typing import Optional

from pydantic import Field, field_validator

from ..formatters import format_response, format_success, to_json
from ..models import BoardSort, MemberRole, SharingAccess
from ..registry import ToolContext, registry
from .common import (
    DELETES,
    CREATES,
    READ_ONLY,
    UPDATES,
    BoardInput,
    FormatMixin,
    PaginationMixin,
    ToolInput,
    annotations,
    compact,
)

# ─── Input Models ────────────────────────────────────────────────────────────


class ConnectionCheckInput(ToolInput):
    """No arguments."""


class ListBoardsInput(PaginationMixin, FormatMixin):
    team_id: Optional[str] = Field(default=None, description="Filter by team ID")
    query: Optional[str] = Field(default=None, description="Search query string", max_length=500)
    sort: Optional[BoardSort] = Field(default=None, description="Sort order")


class GetBoardInput(BoardInput, FormatMixin):
    pass


class CreateBoardInput(ToolInput):
    name: str = Field(..., description="Board name", min_length=1, max_length=60)
    description: Optional[str] = Field(default=None, description="Board description", max_length=300)
    team_id: Optional[str] = Field(default=None, description="Team ID to create the board in")
    access: Optional[SharingAccess] = Field(default=None, description="Sharing access level")


class UpdateBoardInput(BoardInput):
    name: Optional[str] = Field(default=None, description="New board name", max_length=60)
    description: Optional[str] = Field(default=None, description="New board description", max_length=300)


class CopyBoardInput(BoardInput):
    name: Optional[str] = Field(default=None, description="Name for the copied board", max_length=60)
    team_id: Optional[str] = Field(default=None, description="Team ID for the new board")


class ListBoardMembersInput(BoardInput, PaginationMixin, FormatMixin):
    pass


class BoardMemberInput(BoardInput):
    member_id: str = Field(..., description="Member ID", min_length=1)


class GetBoardMemberInput(BoardMemberInput, FormatMixin):
    pass


class ShareBoardInput(BoardInput):
    emails: str = Field(..., description="Comma-separated email addresses", min_length=1)
    role: MemberRole = Field(default="viewer", description="Role to assign")
    message: Optional[str] = Field(default=None, description="Invitation message")

    @field_validator("emails")
    @classmethod
    def _has_email(cls, value: str) -> str:
        if not [e for e in value.split(",") if e.strip()]:
            raise ValueError("at least one email address is required")
        return value

    def email_list(self):
        return [e.strip() for e in self.emails.split(",") if e.strip()]


class UpdateBoardMemberInput(BoardMemberInput):
    role: MemberRole = Field(..., description="New role")


# ─── Connection ──────────────────────────────────────────────────────────────


@registry.tool(name="miro_test_connection", annotations=annotations(READ_ONLY, "Test Miro Connection"))
async def miro_test_connection(ctx: ToolContext, params: ConnectionCheckInput) -> str:
    """Test the connection to the Miro API.

    Returns:
        The user the access token belongs to. An invalid token fails with an
        authentication error.
    """
    user = await ctx.client.get_current_user()
    return to_json({
        "connected": True,
        "message": f"Connected as {user.get('name', 'unknown user')}",
        "user": user,
    })


# ─── Boards ──────────────────────────────────────────────────────────────────


@registry.tool(name="miro_list_boards", annotations=annotations(READ_ONLY, "List Miro Boards"))
async def miro_list_boards(ctx: ToolContext, params: ListBoardsInput) -> str:
    """List Miro boards accessible to the user.

    Args:
      - limit: Number of boards to return (1-100, default: configured page size)
      - cursor: Pagination cursor from previous response
      - teamId: Filter by team ID
      - query: Search query string
      - sort: Sort order (default, last_modified, last_opened, last_created, alphabetically)
      - format: Response format ('json' or 'markdown')

    Returns:
      Paginated list of boards with id, name, description, and viewLink.
    """
    page = await ctx.client.list_boards(
        limit=params.limit, cursor=params.cursor, team_id=params.team_id, query=params.query, sort=params.sort
    )
    return format_response(page, params.format, "boards", limit=ctx.config.character_limit)


@registry.tool(name="miro_get_board", annotations=annotations(READ_ONLY, "Get Miro Board"))
async def miro_get_board(ctx: ToolContext, params: GetBoardInput) -> str:
    """Get a specific Miro board by ID.

    Returns:
      Board details including name, description, sharing settings, and links.
    """
    board = await ctx.client.get_board(params.board_id)
    return format_response(board, params.format, "board")


@registry.tool(name="miro_create_board", annotations=annotations(CREATES, "Create Miro Board"))
async def miro_create_board(ctx: ToolContext, params: CreateBoardInput) -> str:
    """Create a new Miro board.

    Args:
      - name: Board name (required)
      - description: Board description
      - teamId: Team ID to create the board in
      - access: Sharing access level (private, view, comment, edit)

    Returns:
      The created board with its ID and viewLink.
    """
    body = compact({"name": params.name, "description": params.description, "teamId": params.team_id})
    if params.access:
        body["sharingPolicy"] = {"access": params.access}
    board = await ctx.client.create_board(body)
    return format_success("Board created", "board", board)


@registry.tool(name="miro_update_board", annotations=annotations(UPDATES, "Update Miro Board"))
async def miro_update_board(ctx: ToolContext, params: UpdateBoardInput) -> str:
    """Update the name or description of an existing Miro board."""
    body = compact({"name": params.name, "description": params.description})
    board = await ctx.client.update_board(params.board_id, body)
    return format_success("Board updated", "board", board)


@registry.tool(name="miro_delete_board", annotations=annotations(DELETES, "Delete Miro Board"))
async def miro_delete_board(ctx: ToolContext, params: BoardInput) -> str:
    """Delete a Miro board. This cannot be undone."""
    await ctx.client.delete_board(params.board_id)
    return format_success(f"Board {params.board_id} deleted")


@registry.tool(name="miro_copy_board", annotations=annotations(CREATES, "Copy Miro Board"))
async def miro_copy_board(ctx: ToolContext, params: CopyBoardInput) -> str:
    """Create a copy of a Miro board.

    Returns:
      The copied board with its new ID and viewLink.
    """
    board = await ctx.client.copy_board(params.board_id, name=params.name, team_id=params.team_id)
    return format_success("Board copied", "board", board)


# ─── Board Members ───────────────────────────────────────────────────────────


@registry.tool(name="miro_list_board_members", annotations=annotations(READ_ONLY, "List Board Members"))
async def miro_list_board_members(ctx: ToolContext, params: ListBoardMembersInput) -> str:
    """List members of a Miro board with their roles."""
    page = await ctx.client.list_board_members(params.board_id, limit=params.limit, cursor=params.cursor)
    return format_response(page, params.format, "members", limit=ctx.config.character_limit)


@registry.tool(name="miro_get_board_member", annotations=annotations(READ_ONLY, "Get Board Member"))
async def miro_get_board_member(ctx: ToolContext, params: GetBoardMemberInput) -> str:
    """Get a specific board member by ID, including role and email."""
    member = await ctx.client.get_board_member(params.board_id, params.member_id)
    return format_response(member, params.format, "member")


@registry.tool(name="miro_share_board", annotations=annotations(CREATES, "Share Miro Board"))
async def miro_share_board(ctx: ToolContext, params: ShareBoardInput) -> str:
    """Share a Miro board with users via email invitation.

    Args:
      - boardId: Board ID to share
      - emails: Comma-separated email addresses to invite
      - role: Role to assign (viewer, commenter, editor, coowner)
      - message: Optional invitation message
    """
    emails = params.email_list()
    await ctx.client.share_board(params.board_id, emails, role=params.role, message=params.message)
    return format_success(f"Board shared with {len(emails)} user(s)")


@registry.tool(name="miro_update_board_member", annotations=annotations(UPDATES, "Update Board Member"))
async def miro_update_board_member(ctx: ToolContext, params: UpdateBoardMemberInput) -> str:
    """Change a board member's role (viewer, commenter, editor, coowner)."""
    member = await ctx.client.update_board_member(params.board_id, params.member_id, params.role)
    return format_success("Member updated", "member", member)


@registry.tool(name="miro_remove_board_member", annotations=annotations(DELETES, "Remove Board Member"))
async def miro_remove_board_member(ctx: ToolContext, params: BoardMemberInput) -> str:
    """Remove a member from a Miro board."""
    await ctx.client.remove_board_member(params.board_id, params.member_id)
    return format_success(f"Member {params.member_id} removed from board")
