"""Push events into a receiver and split a stream into documents."""

from yamlet import EventCollector, Parser

collector = EventCollector()
Parser("--- first\n--- [second]\n...\n").load(collector)

for index, document in enumerate(collector.documents()):
    print(index, [event.type.name for event in document])
