from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from integrations.entities import decode

SUCCESS = 'success'


def _flatten(arguments: Any) -> Optional[Dict[str, Any]]:
    if arguments is None:
        return None
    to_dict = getattr(arguments, 'to_dict', None)
    if callable(to_dict):
        return to_dict()
    return dict(arguments)


@dataclass
class RpcRequest:
    method: str
    arguments: Optional[Dict[str, Any]] = None
    tag: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.method, str) or not self.method:
            raise ValueError('request takes method as a non-empty string')
        self.arguments = _flatten(self.arguments)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {'method': self.method}
        if self.arguments is not None:
            body['arguments'] = self.arguments
        if self.tag is not None:
            body['tag'] = self.tag
        return body

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RpcRequest':
        return cls(method=data['method'], arguments=data.get('arguments'), tag=data.get('tag'))

    @classmethod
    def from_json(cls, text: str) -> 'RpcRequest':
        return cls.from_dict(json.loads(text))


@dataclass
class RpcResponse:
    result: str
    arguments: Optional[Dict[str, Any]] = None
    tag: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.result == SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {'result': self.result}
        if self.arguments is not None:
            body['arguments'] = self.arguments
        if self.tag is not None:
            body['tag'] = self.tag
        return body

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def deserialize(self, entity_cls):
        return decode(self.arguments, entity_cls)

    @classmethod
    def from_dict(cls, data: Any) -> 'RpcResponse':
        """Build a response from a decoded body; raises ValueError when malformed."""
        if not isinstance(data, dict) or not isinstance(data.get('result'), str):
            raise ValueError('response without result')
        args = data.get('arguments')
        tag = data.get('tag')
        return cls(
            result=data['result'],
            arguments=args if isinstance(args, dict) else None,
            tag=tag if isinstance(tag, int) and not isinstance(tag, bool) else None,
        )

    @classmethod
    def from_json(cls, text: str) -> 'RpcResponse':
        return cls.from_dict(json.loads(text))
