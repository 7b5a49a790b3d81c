from sqlalchemy import Column, Integer, String

from inventory.database import Base


class Category(Base):
    """
    Category model grouping products for display.

    Categories are seeded externally and are read-only to the service,
    so ids are assigned by the seeder rather than generated.

    Attributes:
        id: Externally assigned identifier
        name: Category name
        description: Optional free text description
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
