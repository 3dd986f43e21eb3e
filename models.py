from sqlalchemy import Column, Integer, String, Numeric, Date, Enum
from database import Base
from common.enum import LaunchType


class Launch(Base):
    __tablename__ = "launches"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(
        Enum(
            LaunchType,
            name="launch_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls]
        ),
        nullable=False,
        default=LaunchType.DEBITO,
        server_default=LaunchType.DEBITO.value
    )
    # UTC calendar date
    date = Column(Date, nullable=False, index=True)

    def __repr__(self):
        return f"<Launch id={self.id} {self.type.value if self.type else None} {self.amount} {self.date}>"
