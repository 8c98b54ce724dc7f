"""Static landing page; it makes no backend calls."""

from storefront.api.schemas.pages import FeatureCard, HomeView, NavLink
from storefront.pages.base import build_chrome

FEATURES = (
    (
        "Premium Coffee",
        "Sourced directly from the finest coffee farms around the world",
    ),
    (
        "Fresh Roasted",
        "Roasted to perfection and delivered fresh to your doorstep",
    ),
    (
        "Expert Curation",
        "Hand-selected by our coffee experts for exceptional quality",
    ),
)


def home_view() -> HomeView:
    return HomeView(
        chrome=build_chrome(),
        tagline="Powered by FastAPI and Magento",
        hero_image="/media/bg-hero-chillyourbeans.png",
        calls_to_action=[
            NavLink(label="Shop Coffee", href="/coffee"),
        ],
        features=[FeatureCard(title=title, body=body) for title, body in FEATURES],
    )
