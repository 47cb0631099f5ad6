# src/atlas_converge/core/resource/builtin.py
"""
Resources embutidos: `execute` e `block`.

Ambos são realizados pelos Providers embutidos registrados no DEFAULT
global do PlatformRegistry.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .resource import NOTHING, Resource


class Execute(Resource):
    """Executa um comando externo. O comando padrão é o próprio nome."""

    kind = "execute"
    allowed_actions = (NOTHING, "run")
    default_action = "run"

    def __init__(
        self,
        name: str,
        *,
        command: Union[str, Sequence[str], None] = None,
        cwd: Optional[str] = None,
        environment: Optional[Dict[str, Any]] = None,
        returns: Union[int, List[int]] = 0,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ):
        self.command = command if command is not None else name
        self.cwd = cwd
        self.environment = dict(environment or {})
        self.returns = returns
        self.timeout = timeout
        super().__init__(name, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "command": self.command,
            "cwd": self.cwd,
            "environment": dict(self.environment),
            "returns": self.returns,
            "timeout": self.timeout,
        })
        return data


class Block(Resource):
    """Executa um callable em processo."""

    kind = "block"
    allowed_actions = (NOTHING, "run")
    default_action = "run"

    def __init__(self, name: str, *, block: Callable[[], Any], **kwargs: Any):
        if not callable(block):
            raise TypeError("block must be callable")
        self.block = block
        super().__init__(name, **kwargs)
