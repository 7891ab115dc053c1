"""Thread safe: parse 1000 documents in parallel."""

from concurrent.futures import ThreadPoolExecutor

from yamlet import parse

docs = [f"id: {i}\nitems: [a, b, {i}]\n" for i in range(1000)]

with ThreadPoolExecutor(max_workers=8) as ex:
    results = list(ex.map(lambda text: list(parse(text)), docs))

print(f"Parsed {len(results)} documents in parallel")
print("Events per document:", len(results[0]))
