from datetime import datetime, timezone
def utcnow():
    return datetime.now(timezone.utc)
from .user import User
from .auth import RefreshToken
from .family import Family
from .family_member import FamilyMember
from .dwelling import Dwelling
from .utility_contract import UtilityContract
from .movement import Movement
