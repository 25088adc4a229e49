# Import all models to ensure they're registered with SQLAlchemy
from moderno.models.users import User
from moderno.models.clients import Client
from moderno.models.transactions import Transaction
from moderno.models.deals import Deal
from moderno.models.interactions import Interaction
from moderno.models.inquiries import Inquiry
