"""Assembly of the action registry.

The registry is built once at startup and handed to the Dispatcher; the
order below is the order actions run for every event.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from core.assistant import DebugActions, DirectMessageHelper
from core.builtin_commands import build_commands, help_text_for
from core.commands import CommandRouter
from core.config import ReconcilerConfig
from core.dispatcher import Action
from core.messenger import Messenger
from core.models import EventKind
from core.moderation import AnnouncementModerator, ReactionModerator
from core.ports import DirectoryPort, MessagePort
from core.reconciler import MembershipReconciler


def build_actions(
    directory: DirectoryPort,
    messages: MessagePort,
    messenger: Messenger,
    reconciler: Optional[MembershipReconciler] = None,
    today: Optional[Callable[[], date]] = None,
) -> List[Action]:
    config = messenger.config
    router = CommandRouter(build_commands(directory, messenger, today), config.bot_user_id, config.bot_username)
    if reconciler is None:
        reconciler = MembershipReconciler(directory, messenger, ReconcilerConfig())

    direct_helper = DirectMessageHelper(messenger, help_text_for(config.bot_username, router.commands))
    announcements = AnnouncementModerator(messenger)
    reactions = ReactionModerator(directory, messages, messenger)

    actions = [
        Action("Command Handler", router.handle, EventKind.POSTED),
        Action("About DM Response", direct_helper.handle, EventKind.POSTED),
        Action("Delete Non-announcement", announcements.handle, EventKind.POSTED),
        Action("Welcome New Users", reconciler.handle_join, EventKind.NEW_USER),
        Action("Delete Own Message", reactions.handle_delete_request, EventKind.REACTION_ADDED),
        Action("Source Requests", reactions.handle_source_request, EventKind.REACTION_ADDED),
    ]
    if config.debugging:
        debug = DebugActions(messenger)
        actions.append(Action("Debug Log Channel Handler", debug.handle_liveness, EventKind.POSTED))
        actions.append(Action("Show All Events", debug.echo_event))
    return actions
