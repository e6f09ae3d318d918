"""Three step checkout wizard: shipping, payment, confirmation.

The wizard only moves forward. The order is created when the shipping step
is accepted, so a failed payment can be retried against the same order
without creating another one.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Type, Union

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as SchemaError

from .cart_store import CartStore
from .config import settings
from .errors import (
    ApiError,
    AuthenticationError,
    EmptyCartError,
    InvalidTransitionError,
    PaymentFailedError,
    StorefrontError,
    ValidationError,
)
from .money import to_minor_units
from .schemas import Address, CreateOrderRequest, Order, PaymentIntent, PaymentIntentStatus
from .services.auth import AuthService
from .services.orders import OrderService
from .services.payments import PaymentService
from .validators import check_address, check_payment_card


class CheckoutStep(str, Enum):
    SHIPPING = "shipping"
    PAYMENT = "payment"
    CONFIRMATION = "confirmation"


@dataclass(frozen=True)
class Shipping:
    step = CheckoutStep.SHIPPING


@dataclass(frozen=True)
class Payment:
    order: Order
    cart_total: Decimal
    step = CheckoutStep.PAYMENT


@dataclass(frozen=True)
class Confirmation:
    order: Order
    payment: PaymentIntent
    step = CheckoutStep.CONFIRMATION


CheckoutState = Union[Shipping, Payment, Confirmation]

_NEXT: Dict[type, type] = {
    Shipping: Payment,
    Payment: Confirmation,
    Confirmation: Shipping,
}


class ShippingForm(BaseModel):
    """Raw values from the shipping form."""

    first_name: str = ""
    last_name: str = ""
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "US"
    phone: str = ""
    notes: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _blank_for_none(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_input(cls, form: "ShippingForm | Mapping[str, Any]") -> "ShippingForm":
        """Accept a form or raw mapping; type errors become ``ValidationError``."""

        if isinstance(form, cls):
            return form
        try:
            return cls.model_validate(dict(form))
        except SchemaError as exc:
            fields = [str(err["loc"][0]) for err in exc.errors() if err["loc"]]
            raise ValidationError(f"Please check: {', '.join(fields)}", fields) from exc

    def to_order_request(self) -> CreateOrderRequest:
        """Normalize into an order request; billing mirrors shipping."""

        result = check_address(self.model_dump())
        if not result["passed"]:
            raise ValidationError(result["reason"], result["missing_fields"])

        shipping = Address(
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            address_line1=self.address_line1.strip(),
            address_line2=self.address_line2.strip() or None,
            city=self.city.strip(),
            state=self.state.strip(),
            postal_code=self.postal_code.strip(),
            country=self.country.strip().upper(),
            phone=self.phone.strip() or None,
        )
        billing = shipping.model_copy(update={"phone": None})
        return CreateOrderRequest(
            shipping_address=shipping,
            billing_address=billing,
            notes=self.notes.strip() or None,
        )


def describe(exc: StorefrontError) -> str:
    if isinstance(exc, ApiError):
        return exc.message
    return str(exc)


class CheckoutFlow:
    def __init__(
        self,
        cart: CartStore,
        auth: AuthService,
        orders: OrderService,
        payments: PaymentService,
        currency: Optional[str] = None,
    ) -> None:
        self.cart = cart
        self.auth = auth
        self.orders = orders
        self.payments = payments
        self.currency = currency or settings.currency
        self.state: CheckoutState = Shipping()
        self.error: Optional[str] = None
        self.is_processing = False

    @property
    def step(self) -> CheckoutStep:
        return self.state.step

    @property
    def order(self) -> Optional[Order]:
        return getattr(self.state, "order", None)

    def submit_shipping(self, form: ShippingForm | Mapping[str, Any]) -> Order:
        """Validate the shipping step, create the order, and move to payment."""

        self._expect(Shipping, CheckoutStep.PAYMENT)
        self.error = None

        try:
            if not self.auth.is_authenticated:
                raise AuthenticationError("Please login to complete your purchase")
            if self.cart.is_empty():
                raise EmptyCartError()
            request = ShippingForm.from_input(form).to_order_request()
            cart_total = self.cart.get_total()
            with self._processing():
                order = self.orders.create_order(request)
        except StorefrontError as exc:
            self.error = describe(exc)
            raise

        self._advance(Payment(order=order, cart_total=cart_total))
        return order

    def submit_payment(
        self,
        payment_method_id: Optional[str] = None,
        card: Optional[Mapping[str, str]] = None,
    ) -> PaymentIntent:
        """Create and confirm a payment intent for the pending order.

        Any failure leaves the wizard on the payment step with the same order.
        """

        state = self._expect(Payment, CheckoutStep.CONFIRMATION)
        self.error = None

        try:
            if card:
                result = check_payment_card(card.get("number"), card.get("expiry"), card.get("cvc"))
                if not result["passed"]:
                    raise ValidationError(result["reason"], result["invalid_fields"])
            amount = to_minor_units(state.order.grand_total or state.cart_total)
            if amount <= 0:
                raise ValidationError("Order total must be positive", ["amount"])
            with self._processing():
                intent = self.payments.create_payment_intent(
                    amount,
                    currency=self.currency,
                    payment_method_id=payment_method_id,
                    metadata={"order_id": state.order.id},
                )
                confirmed = self.payments.confirm_payment(intent.id, payment_method_id)
            if confirmed.status == PaymentIntentStatus.FAILED:
                raise PaymentFailedError(confirmed.id, confirmed.status.value)
        except StorefrontError as exc:
            self.error = describe(exc)
            raise

        self.cart.clear_cart()
        self._advance(Confirmation(order=state.order, payment=confirmed))
        return confirmed

    def return_home(self) -> None:
        self._expect(Confirmation, CheckoutStep.SHIPPING)
        self.error = None
        self._advance(Shipping())

    def _expect(self, state_type: Type[Any], target: CheckoutStep) -> Any:
        if not isinstance(self.state, state_type):
            raise InvalidTransitionError(self.step.value, target.value)
        return self.state

    def _advance(self, new_state: CheckoutState) -> None:
        if _NEXT[type(self.state)] is not type(new_state):
            raise InvalidTransitionError(self.step.value, new_state.step.value)
        self.state = new_state

    @contextmanager
    def _processing(self) -> Iterator[None]:
        self.is_processing = True
        try:
            yield
        finally:
            self.is_processing = False
