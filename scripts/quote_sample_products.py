"""
Print refund quotes for every product in the sample catalog.

Shows which window or override applies to each product right now, and
optionally at a later moment:

    python scripts/quote_sample_products.py
    python scripts/quote_sample_products.py --hours-from-now 3
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import settings
from use_cases.cancellations import ProductCatalog, RefundPolicyEngine, WindowMatching

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--hours-from-now",
        type=float,
        default=0.0,
        help="Evaluate as if this many hours had passed since the catalog was loaded",
    )
    parser.add_argument(
        "--matching",
        choices=[m.value for m in WindowMatching],
        default=settings.window_matching,
        help="Window matching mode",
    )
    args = parser.parse_args()

    loaded_at = datetime.now(timezone.utc)
    catalog = ProductCatalog.with_sample_data(loaded_at)
    engine = RefundPolicyEngine(matching=WindowMatching(args.matching))
    evaluation_time = loaded_at + timedelta(hours=args.hours_from_now)

    logger.info(f"Evaluating {len(catalog)} products at {evaluation_time.isoformat()} ({args.matching})")
    logger.info("=" * 60)
    for product in catalog.get_all():
        decision = engine.evaluate(product, evaluation_time)
        logger.info(
            f"{product.id} {product.title} [{product.provider}] "
            f"{decision.hours_before_service:.1f}h before service"
        )
        logger.info(
            f"  {decision.policy_name}: refund {decision.refund_amount} {decision.currency}, "
            f"fee {decision.cancellation_fee} - {decision.message}"
        )


if __name__ == "__main__":
    main()
