import json
import sys
from dataclasses import asdict

from fxstreet_calendar.fetch import FileSource, WidgetSource
from fxstreet_calendar.parse_calendar import extract_calendar

source = FileSource(sys.argv[1]) if len(sys.argv) > 1 else WidgetSource()
doc = source.load()
result = extract_calendar(doc)
print(f"events={len(result.events)} rejected={result.rejected_rows}")
print(json.dumps([asdict(e) for e in result.events[:10]], indent=2, ensure_ascii=False))
