"""Automation channels and the group-qualified id codec."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from capedit.core.model import NameValue, sorted_name_values

GROUP_SEPARATOR = "#"


def encode_group_id(group: str, channel_id: str) -> str:
    return f"{group}{GROUP_SEPARATOR}{channel_id}"


def decode_group_id(value: str, *, default_group: str = "") -> tuple[str, str]:
    """Split a ``group#id`` string on its first ``#``.

    Text before the separator is the group (possibly empty) and text after it
    is the id. Without a separator the whole value is the id and the group is
    ``default_group``.
    """
    group, sep, channel_id = value.partition(GROUP_SEPARATOR)
    if not sep:
        return default_group, value
    return group, channel_id


@dataclass(frozen=True)
class Channel:
    channel_id: str
    channel_group: str
    mapped_channel_id: str
    mapped_channel_group: str
    channel_type: str
    properties: tuple[NameValue, ...] = ()
    state: tuple[NameValue, ...] = ()

    @classmethod
    def create(
        cls,
        channel_id: str,
        mapped_channel_id: str | None,
        channel_type: str,
        properties: Iterable[NameValue] = (),
        state: Iterable[NameValue] = (),
    ) -> Channel:
        group, own_id = decode_group_id(channel_id)
        if mapped_channel_id is None:
            mapped_group, mapped_id = group, own_id
        else:
            mapped_group, mapped_id = decode_group_id(mapped_channel_id, default_group=group)
        return cls(
            channel_id=own_id,
            channel_group=group,
            mapped_channel_id=mapped_id,
            mapped_channel_group=mapped_group,
            channel_type=channel_type,
            properties=sorted_name_values(properties),
            state=sorted_name_values(state),
        )

    @property
    def channel_with_group(self) -> str:
        return encode_group_id(self.channel_group, self.channel_id)

    @property
    def mapped_channel_with_group(self) -> str | None:
        if not self.is_mapped:
            return None
        return encode_group_id(self.mapped_channel_group, self.mapped_channel_id)

    @property
    def is_mapped(self) -> bool:
        return (
            self.channel_id != self.mapped_channel_id
            or self.channel_group != self.mapped_channel_group
        )

    def remap(self, mapped_channel_id: str) -> Channel:
        mapped_group, mapped_id = decode_group_id(mapped_channel_id, default_group=self.channel_group)
        return replace(self, mapped_channel_id=mapped_id, mapped_channel_group=mapped_group)

    def unmap(self) -> Channel:
        return replace(self, mapped_channel_id=self.channel_id, mapped_channel_group=self.channel_group)
