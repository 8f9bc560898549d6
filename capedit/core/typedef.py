"""Device type definitions: channel groups and channels, parse and export."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from capedit.core.channels import Channel
from capedit.core.errors import ChannelNotFoundError
from capedit.core.model import NameValue, sorted_name_values

LOGGER = logging.getLogger(__name__)


def _name_values(bag: Mapping[str, Any] | None) -> tuple[NameValue, ...]:
    if not bag:
        return ()
    return sorted_name_values(NameValue(name=str(k), value=str(v)) for k, v in bag.items())


def _bag(items: Iterable[NameValue]) -> dict[str, str]:
    return {nv.name: nv.value for nv in items}


def _sorted_channels(channels: Iterable[Channel]) -> list[Channel]:
    return sorted(channels, key=lambda c: c.channel_with_group)


@dataclass
class TypeDefinition:
    service: str = ""
    config_uri: str = ""
    model_name: str = ""
    label: str = ""
    description: str = ""
    channel_groups: list[NameValue] = field(default_factory=list)
    channels: list[Channel] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.channel_groups = list(sorted_name_values(self.channel_groups))
        self.channels = _sorted_channels(self.channels)

    @classmethod
    def parse(cls, data: Mapping[str, Any] | list[Any]) -> TypeDefinition:
        """Build a type definition from its JSON document form.

        A document wrapped in a list uses its first element. A channel whose
        ``mappedChannelId`` equals its ``channelId`` is read as unmapped.
        """
        if isinstance(data, list):
            data = data[0] if data else {}

        channels: list[Channel] = []
        for chl in data.get("channels") or []:
            channel_id = chl["channelId"]
            mapped_channel_id = chl.get("mappedChannelId")
            if mapped_channel_id == channel_id:
                mapped_channel_id = None
            channels.append(
                Channel.create(
                    channel_id,
                    mapped_channel_id,
                    chl.get("channelType") or "",
                    properties=_name_values(chl.get("properties")),
                    state=_name_values(chl.get("state")),
                )
            )

        return cls(
            service=data.get("service") or "",
            config_uri=data.get("configUri") or "",
            model_name=data.get("modelName") or "",
            label=data.get("label") or "",
            description=data.get("description") or "",
            channel_groups=list(_name_values(data.get("channelGroups"))),
            channels=channels,
        )

    def export(self) -> dict[str, Any]:
        channels: list[dict[str, Any]] = []
        for chl in self.channels:
            entry: dict[str, Any] = {"channelId": chl.channel_with_group}
            if chl.is_mapped:
                entry["mappedChannelId"] = chl.mapped_channel_with_group
            entry["channelType"] = chl.channel_type
            entry["properties"] = _bag(chl.properties)
            entry["state"] = _bag(chl.state)
            channels.append(entry)

        return {
            "service": self.service,
            "configUri": self.config_uri,
            "modelName": self.model_name,
            "label": self.label,
            "description": self.description,
            "channelGroups": _bag(self.channel_groups),
            "channels": channels,
        }

    def group_in_use(self, group_name: str) -> bool:
        return any(chl.mapped_channel_group == group_name for chl in self.channels)

    def group_label(self, group_name: str) -> str | None:
        for nv in self.channel_groups:
            if nv.name == group_name:
                return nv.value
        return None

    def add_group(self, group_name: str, label: str) -> None:
        groups = [nv for nv in self.channel_groups if nv.name != group_name]
        groups.append(NameValue(name=group_name, value=label))
        self.channel_groups = list(sorted_name_values(groups))

    def remove_group(self, group_name: str) -> bool:
        """Drop a channel group; callers check :meth:`group_in_use` first."""
        before = len(self.channel_groups)
        self.channel_groups = [nv for nv in self.channel_groups if nv.name != group_name]
        return len(self.channel_groups) != before

    def channel(self, channel_with_group: str) -> Channel:
        for chl in self.channels:
            if chl.channel_with_group == channel_with_group:
                return chl
        raise ChannelNotFoundError(f"No channel '{channel_with_group}' in {self.model_name or 'type definition'}")

    def replace_channel(self, channel: Channel) -> None:
        key = channel.channel_with_group
        self.channel(key)
        others = [chl for chl in self.channels if chl.channel_with_group != key]
        self.channels = _sorted_channels([*others, channel])

    def map_channel(self, channel_with_group: str, mapped_channel_id: str) -> Channel:
        updated = self.channel(channel_with_group).remap(mapped_channel_id)
        self.replace_channel(updated)
        LOGGER.debug("Mapped %s to %s", channel_with_group, updated.mapped_channel_with_group)
        return updated

    def unmap_channel(self, channel_with_group: str) -> Channel:
        updated = self.channel(channel_with_group).unmap()
        self.replace_channel(updated)
        return updated
