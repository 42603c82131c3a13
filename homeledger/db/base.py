# Import every model so Base.metadata knows all tables before create_all()
from ..models.user import User
from ..models.auth import RefreshToken
from ..models.family import Family
from ..models.family_member import FamilyMember, MemberRole
from ..models.dwelling import Dwelling
from ..models.utility_contract import UtilityContract, UtilityType, Periodicity
from ..models.movement import Movement, MovementKind
from ..db.base_class import Base
