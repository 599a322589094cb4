import logging
import importlib
import inspect
import pkgutil
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional

import sirc_core.commands
from sirc_core.commands.command_types import CommandKind, CommandPayload, ParsedCommand
from sirc_core.errors import NoActiveContext

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager
    from sirc_core.server_state import Server

logger = logging.getLogger("sirc.command_handler")

CommandParser = Callable[[str], CommandPayload]
CommandHandlerCallable = Callable[["SessionManager", Any], Awaitable[None]]


@dataclass
class RegisteredCommand:
    kind: CommandKind
    parser: CommandParser
    handler: CommandHandlerCallable
    usage: str
    description: str
    module_path: str


def resolve_context_channel(server: "Server", channel_arg: Optional[str]) -> str:
    """Explicit channel argument wins; otherwise the active channel, if any."""
    if channel_arg:
        return channel_arg.split()[0]
    active = server.active_channel
    if active is None:
        raise NoActiveContext()
    return active.name


class CommandHandler:
    def __init__(self, session_manager: "SessionManager"):
        self.manager = session_manager
        self.command_map: Dict[CommandKind, RegisteredCommand] = {}
        self._load_command_modules()
        missing = [kind for kind in CommandKind if kind not in self.command_map]
        if missing:
            raise RuntimeError(f"No handler registered for command kinds: {[k.name for k in missing]}")

    def _load_command_modules(self):
        logger.debug(f"Starting command loading from package: {sirc_core.commands.__name__}")
        for _, module_name, is_pkg in pkgutil.walk_packages(
            path=sirc_core.commands.__path__,
            prefix=sirc_core.commands.__name__ + ".",
        ):
            if is_pkg:
                continue
            module = importlib.import_module(module_name)
            definitions = getattr(module, "COMMAND_DEFINITIONS", None)
            if not definitions:
                logger.debug(f"Module {module_name} does not have COMMAND_DEFINITIONS.")
                continue
            for cmd_def in definitions:
                self._register(module, module_name, cmd_def)
        logger.debug(f"Finished command loading: {sorted(k.name for k in self.command_map)}")

    def _register(self, module: Any, module_name: str, cmd_def: Dict[str, Any]):
        kind: CommandKind = cmd_def["kind"]
        parser = getattr(module, cmd_def["parser"], None)
        handler = getattr(module, cmd_def["handler"], None)
        if not callable(parser) or not inspect.iscoroutinefunction(handler):
            raise RuntimeError(f"Bad command definition for '{kind.name}' in {module_name}")
        if kind in self.command_map:
            raise RuntimeError(
                f"Command '{kind.name}' defined twice: {self.command_map[kind].module_path} and {module_name}"
            )
        help_info = cmd_def.get("help", {})
        self.command_map[kind] = RegisteredCommand(
            kind=kind,
            parser=parser,
            handler=handler,
            usage=help_info.get("usage", f"/{kind.value}"),
            description=help_info.get("description", ""),
            module_path=module_name,
        )
        logger.debug(f"Registered command '{kind.name}' from {module_name}")

    def parse(self, command: str, args_str: str) -> ParsedCommand:
        kind = CommandKind.from_name(command)
        return ParsedCommand(kind, self.command_map[kind].parser(args_str))

    async def dispatch(self, command: str, args_str: str = ""):
        """Parses and runs one command. Raises CommandError subclasses on failure."""
        parsed = self.parse(command, args_str)
        registered = self.command_map[parsed.kind]
        logger.debug(f"Dispatching {parsed.kind.name} with {parsed.payload}")
        await registered.handler(self.manager, parsed.payload)

    def get_help(self, command: str) -> RegisteredCommand:
        return self.command_map[CommandKind.from_name(command)]

    def get_named_commands(self) -> List[RegisteredCommand]:
        return sorted(
            (cmd for kind, cmd in self.command_map.items() if kind != CommandKind.SAY),
            key=lambda cmd: cmd.kind.value,
        )
