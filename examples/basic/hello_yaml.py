"""Stream YAML events in 3 lines, zero config, zero deps."""

from yamlet import parse
from yamlet.serialization import format_events

print(format_events(parse("greeting: [hello, world]")), end="")
