# storefront/services/payment_service.py
import asyncio
import logging
import random
from typing import Optional
from ..config import Config
from ..models.order import Order

class PaymentSimulator:
    """Stand-in for a payment provider: succeeds at a configured rate"""

    def __init__(self, success_rate: Optional[float] = None,
                 delay_seconds: Optional[float] = None,
                 rng: Optional[random.Random] = None):
        self.success_rate = Config.PAYMENT_SUCCESS_RATE if success_rate is None else success_rate
        self.delay_seconds = Config.PAYMENT_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self.rng = rng or random.Random()
        self.logger = logging.getLogger(__name__)

    async def process_payment(self, order: Order) -> bool:
        """Charge an order; True when the payment went through"""
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        success = self.rng.random() < self.success_rate
        self.logger.info(
            f"Payment for order {order.order_id} "
            f"({order.total_amount}): {'approved' if success else 'declined'}"
        )
        return success
