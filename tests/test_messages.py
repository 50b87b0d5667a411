from meshchat.commands.messages import EmergencyPayload, system_notice
from meshchat.commands.nicknames import display_name, resolve_peer_id, strip_mention
from meshchat.local import StaticDirectory


def test_system_notice_fields() -> None:
    notice = system_notice("hello")
    assert notice.sender == "system"
    assert notice.is_system
    assert notice.is_relay is False
    assert notice.content == "hello"


def test_emergency_payload_text() -> None:
    payload = EmergencyPayload(
        sender="me", message="🔥 FIRE OUTBREAK - Need Assistance", location="[here]", battery_percent=42
    )
    assert payload.to_text() == (
        "🚨 **SOS ALERT** 🚨\n"
        "User: @me\n"
        "Msg: **🔥 FIRE OUTBREAK - Need Assistance**\n"
        "📍 Loc: [here]\n"
        "🔋 Batt: 42%"
    )


def test_emergency_payload_unknown_battery() -> None:
    payload = EmergencyPayload(sender="me", message="x", location="y")
    assert payload.to_text().endswith("🔋 Batt: Unknown")


def test_resolve_peer_id_returns_first_exact_match() -> None:
    directory = StaticDirectory({"P1": "alice", "P2": "alice", "P3": "Alice"})
    assert resolve_peer_id(directory, "alice") == "P1"
    assert resolve_peer_id(directory, "Alice") == "P3"
    assert resolve_peer_id(directory, "ali") is None


def test_display_name_falls_back_to_peer_id() -> None:
    directory = StaticDirectory({"P1": "alice"})
    assert display_name(directory, "P1") == "alice"
    assert display_name(directory, "P9") == "P9"


def test_strip_mention_only_removes_one_leading_at() -> None:
    assert strip_mention("@bob") == "bob"
    assert strip_mention("bob@") == "bob@"
    assert strip_mention("@@bob") == "@bob"
