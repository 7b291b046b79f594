from enum import Enum


class BillStatus(str, Enum):
    PAID = "Paid"
    PENDING = "Pending"
    REIMBURSED = "Reimbursed"


class ExpenseType(str, Enum):
    FOOD = "Food"
    TAXI = "Taxi"
    LOCAL_CONVEYANCE = "Local Conveyance"
    PERDIUM = "Perdium"
    PARKING = "Parking"
    FLIGHT = "Flight"
    ACCOMMODATION = "Accommodation"
    ENTERTAINMENT = "Entertainment"
    COMMUNICATION = "Communication"
    MEDICAL = "Medical"
    OTHERS = "Others"

    @property
    def label(self) -> str:
        return EXPENSE_TYPE_LABELS.get(self, self.value)

    @property
    def has_route(self) -> bool:
        return self in (ExpenseType.TAXI, ExpenseType.FLIGHT)


EXPENSE_TYPE_LABELS = {
    ExpenseType.TAXI: "Taxi/Cab charges",
    ExpenseType.FLIGHT: "Journey Fare",
}


class Currency(str, Enum):
    USD = "USD"
    INR = "INR"
    CAD = "CAD"
    GBP = "GBP"
    CHF = "CHF"
    EUR = "EUR"
    JPY = "JPY"

