from src.modules.prediction.models import Coordinate

# Version header
API_VERSION_HEADER = "X-API-Version"

# Forecast defaults
DEFAULT_ITERATIONS = 1

# Seed used by GET /coordinates/predict (Progreso, Yucatán coastline)
DEFAULT_SEED: tuple[Coordinate, ...] = (
    Coordinate(latitude=21.295448, longitude=-89.639144),
    Coordinate(latitude=21.292690, longitude=-89.642461),
    Coordinate(latitude=21.293261, longitude=-89.642678),
    Coordinate(latitude=21.292013, longitude=-89.643941),
)

# Reference points served by GET /coordinates
REFERENCE_COORDINATES: tuple[Coordinate, ...] = (
    Coordinate(latitude=40.7128, longitude=-74.0060),  # New York
    Coordinate(latitude=51.5074, longitude=-0.1278),  # London
    Coordinate(latitude=48.8566, longitude=2.3522),  # Paris
    Coordinate(latitude=35.6762, longitude=139.6503),  # Tokyo
    Coordinate(latitude=-33.8688, longitude=151.2093),  # Sydney
    Coordinate(latitude=19.4326, longitude=-99.1332),  # Mexico City
    Coordinate(latitude=37.7749, longitude=-122.4194),  # San Francisco
    Coordinate(latitude=40.4168, longitude=-3.7038),  # Madrid
)
