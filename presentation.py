"""Client-side state for the ledger screen.

``LedgerView`` keeps the selected period, the launches and summary last
fetched from the API, the launch being edited and the loading/error flags.
Everything shown to the user is derived from that state; the API stays the
only source of truth for filtering and totals.
"""
import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from pydantic import ValidationError

from client import LaunchClient, LaunchClientError
from common.enum import LaunchType
from schemas import LaunchCreate, LaunchUpdate, LaunchResponse, MonthSummary

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)

FETCH_ERROR = "Erro ao buscar dados."
SAVE_ERROR = "Não foi possível salvar o lançamento. Verifique os dados."
DELETE_ERROR = "Não foi possível deletar o lançamento."


class FormError(ValueError):
    pass


def format_currency(value) -> str:
    """Brazilian real formatting: R$ 1.234,56"""
    amount = Decimal(str(value))
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}R$ {text}"


def format_date(value: dt.date) -> str:
    return value.strftime("%d/%m/%Y")


def type_label(launch_type: LaunchType) -> str:
    if launch_type is LaunchType.CREDITO:
        return "credito"
    if launch_type is LaunchType.DEBITO:
        return "debito"
    raise ValueError(f"Unknown launch type: {launch_type!r}")


@dataclass
class LaunchForm:
    description: str = ""
    amount: str = ""
    date: str = ""
    type: LaunchType = LaunchType.DEBITO

    @classmethod
    def from_launch(cls, launch: LaunchResponse) -> "LaunchForm":
        return cls(
            description=launch.description,
            amount=f"{launch.amount:.2f}",
            date=launch.date.isoformat(),
            type=launch.type,
        )

    def validate(self) -> LaunchCreate:
        if not self.description.strip() or not str(self.amount).strip() or not self.date.strip():
            raise FormError("Todos os campos são obrigatórios.")
        try:
            amount = Decimal(str(self.amount).strip())
        except InvalidOperation:
            raise FormError("O valor deve ser numérico.")
        if not amount.is_finite():
            raise FormError("O valor deve ser numérico.")
        if amount < 0:
            raise FormError("O valor não pode ser negativo.")
        try:
            return LaunchCreate(
                description=self.description,
                amount=amount,
                type=self.type,
                date=self.date.strip(),
            )
        except ValidationError as e:
            raise FormError("Verifique os dados do lançamento.") from e


@dataclass
class LaunchRow:
    id: int
    description: str
    amount: str
    type: str
    css_class: str
    date: str


class LedgerView:
    def __init__(self, client: LaunchClient, today: Optional[dt.date] = None):
        today = today or dt.date.today()
        self.client = client
        self.today = today
        self.year = today.year
        self.month = today.month
        self.launches: List[LaunchResponse] = []
        self.summary = MonthSummary()
        self.editing: Optional[LaunchResponse] = None
        self.is_loading = False
        self.error = ""

    # Period filter
    def year_options(self) -> List[int]:
        return [self.today.year - offset for offset in range(5)]

    @staticmethod
    def month_options() -> List[Tuple[int, str]]:
        return [(number, name) for number, name in enumerate(MONTH_NAMES, start=1)]

    def select_period(self, year: int, month: int) -> None:
        self.year = year
        self.month = month
        self.refresh()

    def refresh(self) -> bool:
        """Fetch the selected month; previous data stays on failure."""
        self.is_loading = True
        try:
            launches = self.client.list_by_month(self.year, self.month)
            summary = self.client.get_summary(self.year, self.month)
        except LaunchClientError as e:
            logger.error("Erro ao buscar dados: %s", e)
            self.error = FETCH_ERROR
            return False
        finally:
            self.is_loading = False

        self.launches = launches
        self.summary = summary
        self.error = ""
        return True

    # Edit flow
    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    def start_edit(self, launch: LaunchResponse) -> LaunchForm:
        self.editing = launch
        self.error = ""
        return LaunchForm.from_launch(launch)

    def cancel_edit(self) -> None:
        self.editing = None
        self.error = ""

    def submit(self, form: LaunchForm) -> bool:
        try:
            data = form.validate()
        except FormError as e:
            self.error = str(e)
            return False

        try:
            if self.editing is None:
                self.client.create_launch(data)
            else:
                self.client.update_launch(self.editing.id, LaunchUpdate(**data.model_dump()))
        except LaunchClientError as e:
            logger.error("Erro ao salvar lançamento: %s", e)
            self.error = SAVE_ERROR
            return False

        self.editing = None
        self.error = ""
        self.refresh()
        return True

    def delete(self, launch_id: int) -> bool:
        try:
            self.client.delete_launch(launch_id)
        except LaunchClientError as e:
            logger.error("Erro ao deletar lançamento: %s", e)
            self.error = DELETE_ERROR
            return False

        if self.editing is not None and self.editing.id == launch_id:
            self.editing = None
        self.refresh()
        return True

    # Derived view data
    @property
    def balance(self) -> Decimal:
        return self.summary.balance

    def rows(self) -> List[LaunchRow]:
        ordered = sorted(self.launches, key=lambda launch: (launch.date, launch.id), reverse=True)
        return [
            LaunchRow(
                id=launch.id,
                description=launch.description,
                amount=format_currency(launch.amount),
                type=launch.type.value,
                css_class=type_label(launch.type),
                date=format_date(launch.date),
            )
            for launch in ordered
        ]

    def totals(self) -> dict:
        return {
            "credits": format_currency(self.summary.total_credits),
            "debits": format_currency(self.summary.total_debits),
            "balance": format_currency(self.balance),
        }
