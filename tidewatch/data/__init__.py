from .parsing import parse_time_series
from .fetchers import TimeSeriesFetcher, fetch_station_directory, format_instant
from .processing import active_stations, stations_frame
