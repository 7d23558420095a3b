import sys
from dataclasses import asdict
from pathlib import Path

import pandas as pd

from fxstreet_calendar.fetch import FileSource, WidgetSource
from fxstreet_calendar.parse_calendar import EVENT_FIELDS, parse_calendar


def main() -> None:
	out_path = Path('calendar.csv')
	source = FileSource(sys.argv[1]) if len(sys.argv) > 1 else WidgetSource()
	events = parse_calendar(source.load())
	# deterministic column order, all values kept as page text
	df = pd.DataFrame([asdict(e) for e in events], columns=EVENT_FIELDS, dtype=str)
	df.to_csv(out_path, index=False)
	print(f'saved: {out_path.resolve()}')
	print(f'rows: {len(df)}')
	if not df.empty:
		print('columns:', list(df.columns))
		print('\nhead:')
		print(df.head(20).to_string(index=False))
		print('\nCounts by currency:')
		print(df.groupby('currency').size())


if __name__ == '__main__':
	main()
