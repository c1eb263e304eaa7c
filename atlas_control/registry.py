"""
CommandRegistry - Explicit command registration with role gating

Bounded Context: Command registration and validation
Responsibilities:
  - Register commands with handlers and the roles allowed to run them
  - Validate command existence and permission before execution
  - Provide introspection (available_commands, available_for, get_help)

Threading: Thread-safe (uses lock for write operations)
"""

from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Set
import threading

from atlas_zone.roles import ALL_ROLES, UserRole


class CommandNotAvailableError(Exception):
    """Raised when attempting to execute an unregistered command"""
    pass


class CommandNotPermittedError(Exception):
    """Raised when the caller's role may not run a registered command"""

    def __init__(self, command: str, role: UserRole):
        self.command = command
        self.role = role
        super().__init__(f"Command '{command}' not permitted for role {role.value}")


class CommandRegistry:
    """
    Registry for MQTT commands with explicit registration.

    Example:
        registry = CommandRegistry()
        registry.register('resize', handler.resize, "Resize selected zone",
                          roles={UserRole.ZONE_OWNER})

        try:
            registry.execute('resize', {'field': 'radius', 'value': 80},
                             role=UserRole.ZONE_OWNER)
        except CommandNotAvailableError as e:
            print(f"Command not available: {e}")
    """

    def __init__(self):
        self._commands: Dict[str, Callable] = {}
        self._descriptions: Dict[str, str] = {}
        self._roles: Dict[str, FrozenSet[UserRole]] = {}
        self._lock = threading.Lock()

    def register(
        self,
        command: str,
        handler: Callable,
        description: str,
        roles: Iterable[UserRole] = ALL_ROLES
    ) -> None:
        """
        Register a command with its handler function.

        Args:
            command: Command name (lowercase, no spaces)
            handler: Callable that executes the command
            description: Human-readable description for help text
            roles: Roles allowed to run the command (default: everyone)

        Raises:
            ValueError: If command already registered or no role is allowed
        """
        allowed = frozenset(UserRole(role) for role in roles)
        if not allowed:
            raise ValueError(f"Command '{command}' must allow at least one role")

        with self._lock:
            if command in self._commands:
                raise ValueError(f"Command '{command}' already registered")

            self._commands[command] = handler
            self._descriptions[command] = description
            self._roles[command] = allowed

    def execute(
        self,
        command: str,
        command_data: Optional[dict] = None,
        role: Optional[UserRole] = None
    ) -> Any:
        """
        Execute a registered command.

        Args:
            command: Command name to execute
            command_data: Optional command data (full JSON payload)
            role: Caller role (None skips the permission check)

        Returns:
            Whatever the handler returns

        Raises:
            CommandNotAvailableError: If command not registered
            CommandNotPermittedError: If role may not run the command
        """
        if command not in self._commands:
            raise CommandNotAvailableError(
                f"Command '{command}' not available. "
                f"Available commands: {', '.join(sorted(self.available_commands))}"
            )

        if role is not None and UserRole(role) not in self._roles[command]:
            raise CommandNotPermittedError(command, UserRole(role))

        handler = self._commands[command]
        if command_data is not None:
            return handler(command_data)
        return handler()

    def is_available(self, command: str) -> bool:
        return command in self._commands

    def is_permitted(self, command: str, role: UserRole) -> bool:
        return command in self._roles and UserRole(role) in self._roles[command]

    @property
    def available_commands(self) -> Set[str]:
        return set(self._commands.keys())

    def available_for(self, role: UserRole) -> Set[str]:
        """Commands the given role may run."""
        role = UserRole(role)
        return {command for command, roles in self._roles.items() if role in roles}

    def get_help(self) -> Dict[str, str]:
        return dict(self._descriptions)

    def count(self) -> int:
        return len(self._commands)
