"""Pickup Mtaani agent directory."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PickupAgent:
    """A Pickup Mtaani parcel agent location."""

    id: str
    name: str
    road: str
    estate: str
    code: str

    @property
    def label(self) -> str:
        return f"{self.name}, {self.road} ({self.code})"

    def matches(self, search: str) -> bool:
        search = search.lower()
        return any(
            search in value.lower()
            for value in (self.name, self.road, self.estate, self.code)
        )


PICKUP_AGENTS: dict[str, list[PickupAgent]] = {
    "CBD": [
        PickupAgent("cbd_001", "CBD Main Branch", "Kenyatta Avenue", "CBD", "CBD001"),
        PickupAgent("cbd_002", "Nation Centre", "Kimathi Street", "CBD", "CBD002"),
        PickupAgent("cbd_003", "Teleposta Towers", "Koinange Street", "CBD", "CBD003"),
    ],
    "Mtaani": [
        PickupAgent("mt_001", "Thika Road Mall", "Thika Road", "Kasarani", "TH001"),
        PickupAgent("mt_002", "Garden City Mall", "Thika Road", "Kasarani", "TH002"),
        PickupAgent("mt_003", "Roysambu Shopping Center", "Thika Road", "Roysambu", "TH003"),
        PickupAgent("mt_004", "Jogoo Road Plaza", "Jogoo Road", "Makadara", "JG001"),
        PickupAgent("mt_005", "Nyayo Stadium Area", "Jogoo Road", "Embakasi", "JG002"),
        PickupAgent("mt_006", "Prestige Plaza", "Ngong Road", "Kilimani", "NG001"),
        PickupAgent("mt_007", "Junction Mall", "Ngong Road", "Dagoretti", "NG002"),
        PickupAgent("mt_008", "Karen Shopping Centre", "Ngong Road", "Karen", "NG003"),
        PickupAgent("mt_009", "Westgate Shopping Mall", "Waiyaki Way", "Westlands", "WY001"),
        PickupAgent("mt_010", "ABC Place", "Waiyaki Way", "Westlands", "WY002"),
        PickupAgent("mt_011", "Kangemi Shopping Center", "Waiyaki Way", "Kangemi", "WY003"),
        PickupAgent("mt_012", "Lang'ata Link", "Lang'ata Road", "Lang'ata", "LG001"),
        PickupAgent("mt_013", "Oshwal Centre", "Lang'ata Road", "South C", "LG002"),
        PickupAgent("mt_014", "Village Market", "Kiambu Road", "Gigiri", "KB001"),
        PickupAgent("mt_015", "Ridgeways Mall", "Kiambu Road", "Ridgeways", "KB002"),
        PickupAgent("mt_016", "Gateway Mall", "Mombasa Road", "Syokimau", "MB001"),
        PickupAgent("mt_017", "Capital Centre", "Mombasa Road", "Mlolongo", "MB002"),
        PickupAgent("mt_018", "Imara Daima Shopping Centre", "Mombasa Road", "Imara Daima", "MB003"),
        PickupAgent("mt_019", "Greenspan Mall", "Outer Ring Road", "Donholm", "OR001"),
        PickupAgent("mt_020", "Nextgen Mall", "Outer Ring Road", "Donholm", "OR002"),
        PickupAgent("mt_021", "Eastleigh Shopping Centre", "General Waruinge Street", "Eastleigh", "EL001"),
        PickupAgent("mt_022", "Kariokor Market", "Landhies Road", "Kariokor", "EL002"),
        PickupAgent("mt_023", "Umoja Shopping Center", "Outer Ring Road", "Umoja", "EL003"),
    ],
}


def find_pickup_agents(zone: str, search: str = "") -> list[PickupAgent]:
    """List pickup agents in a zone, optionally filtered by a search term.

    Args:
        zone: ``"CBD"`` or ``"Mtaani"``.
        search: Case-insensitive substring matched against the agent's
            name, road, estate and code.

    Returns:
        The matching agents in directory order.

    Raises:
        ValueError: If *zone* is not a known zone.
    """
    if zone not in PICKUP_AGENTS:
        raise ValueError(f"Invalid zone {zone!r}. Must be one of: {', '.join(PICKUP_AGENTS)}")
    agents = PICKUP_AGENTS[zone]
    if search:
        agents = [a for a in agents if a.matches(search)]
    return list(agents)


def get_pickup_agent(agent_id: str) -> PickupAgent | None:
    for agents in PICKUP_AGENTS.values():
        for agent in agents:
            if agent.id == agent_id or agent.code == agent_id:
                return agent
    return None
