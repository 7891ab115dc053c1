"""Cache parsed events to disk as JSON, spans included."""

from yamlet import parse
from yamlet.serialization import from_json, to_json

events = list(parse("- &base {a: 1}\n- *base\n"))

json_str = to_json(events)
restored = from_json(json_str)

print("Original == restored:", events == restored)
print("JSON length:", len(json_str), "chars")
