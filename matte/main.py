import asyncio
import os
import sys
import logging
from dotenv import load_dotenv

from matte.application.registry import DEFAULT_HOST, DEFAULT_PORT, Matte
from matte.domain.fields import TypeTag
from matte.domain.models import Entity, field
from matte.infrastructure.codec import JsonCodec
from matte.infrastructure.server import MatteServer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


class User(Entity):
    name = field("name", TypeTag.STRING)
    email = field("email", TypeTag.STRING)


class Product(Entity):
    name = field("name", TypeTag.STRING)
    price = field("price", TypeTag.INT32)
    category = field("category", TypeTag.STRING)


def build_registry(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> Matte:
    return (
        Matte(port=port, host=host)
        .register("users", User)
        .register("products", Product)
    )


def seed_sample_data(app: Matte) -> None:
    users = app.get_repository("users")
    for name, email in [("John Doe", "john.doe@example.com"), ("Jane Smith", "jane.smith@example.com")]:
        user = User()
        user.name.set(name)
        user.email.set(email)
        users.save(user)
        logger.info(f"Sample user: {JsonCodec.serialize(user)}")

    products = app.get_repository("products")
    for name, price, category in [("Laptop", 999, "Electronics"), ("Coffee Mug", 15, "Kitchen")]:
        product = Product()
        product.name.set(name)
        product.price.set(price)
        product.category.set(category)
        products.save(product)
        logger.info(f"Sample product: {JsonCodec.serialize(product)}")


async def main():
    # Load environment variables from .env file
    load_dotenv()

    host = os.getenv("MATTE_HOST", DEFAULT_HOST)
    raw_port = os.getenv("MATTE_PORT", str(DEFAULT_PORT))
    seed = os.getenv("MATTE_SEED_SAMPLE_DATA", "true").lower() == "true"

    try:
        port = int(raw_port)
    except ValueError:
        logger.error(f"MATTE_PORT must be an integer, got {raw_port!r}.")
        sys.exit(1)

    app = build_registry(host=host, port=port)
    if seed:
        seed_sample_data(app)

    server = MatteServer(app)
    try:
        await server.start()
        # Serve until cancelled
        await asyncio.Event().wait()
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)
    finally:
        await server.stop()

def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server interrupted by user. Exiting gracefully.")

if __name__ == "__main__":
    run()
