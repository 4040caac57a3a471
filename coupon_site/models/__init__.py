from coupon_site.models.coupon import Coupon
from coupon_site.models.admin import Admin
