from .gateway import NameCombinationGateway
from .models import CombinationSet, GeneratedName, StoredName
from .normalizer import parse_name_combinations
from .service import generate_name_combinations
