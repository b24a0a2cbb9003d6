# driver_rewards/core/locales.py

# Error messages
ERROR_USER_NOT_FOUND = "User not found."
ERROR_NOT_A_DRIVER = "Not a driver account."
ERROR_SPONSOR_ORG_NOT_FOUND = "Sponsor org not found for this user."
ERROR_ORGANIZATION_NOT_FOUND = "Organization not found."
ERROR_DRIVER_IDS_REQUIRED = "driverIds must be a non-empty array."
ERROR_POINT_AMOUNT_INVALID = "pointAmount must be a non-zero integer."
ERROR_REASON_REQUIRED = "reason is required."
ERROR_SOURCE_INVALID = "source must be one of: {allowed}."
ERROR_DRIVER_NOT_IN_ORGANIZATION = "Driver is not an active member of this organization."
ERROR_UPPER_LIMIT = "This adjustment would push the driver above the upper point limit of {limit}."
ERROR_LOWER_LIMIT = "This adjustment would push the driver below the lower point limit of {limit}."
ERROR_MONTHLY_LIMIT = (
    "This would exceed your organization's monthly point limit of {limit}. "
    "Monthly total so far: {month_awarded}."
)
ERROR_NO_POINTS_APPLIED = "No points were applied."
ERROR_LIMITS_INVERTED = "point_lower_limit cannot be greater than point_upper_limit."
ERROR_LIMIT_NOT_INTEGER = "{field} must be an integer."
ERROR_NO_ACTIVE_CART = "No active cart found."
ERROR_CART_EMPTY = "Cart is empty."
ERROR_ITEM_NOT_IN_CATALOG = "Item not found in this organization's catalog."
ERROR_ITEM_UNAVAILABLE = "Item is currently unavailable."
ERROR_ITEM_NOT_IN_CART = "Item not found in cart."
ERROR_QUANTITY_INVALID = "quantity must be a positive integer."
ERROR_DRIVER_HAS_NO_SPONSOR = "Driver is not an active member of any sponsor organization."
ERROR_ORDER_NOT_FOUND = "Order not found."
ERROR_CATALOG_ITEM_EXISTS = "This item is already in the organization's catalog."
ERROR_CATALOG_ITEM_NOT_FOUND = "Catalog item not found."
ERROR_FIELD_NOT_EDITABLE = "Field '{field}' cannot be updated."
ERROR_POINT_VALUE_INVALID = "point_value must be a positive number."
ERROR_APPLICATION_NOT_FOUND = "Application not found."
ERROR_APPLICATION_PENDING = "A pending application already exists for this organization."
ERROR_APPLICATION_REVIEW_STATUS = "status must be \"approved\" or \"rejected\"."
ERROR_APPLICATION_ALREADY_REVIEWED = "Application has already been reviewed."
ERROR_NO_ACTIVE_SPONSOR = "No active sponsor found for this driver."
ERROR_CONTEST_TRANSACTION_NOT_FOUND = "Transaction not found or is not a deduction."
ERROR_CONTEST_PENDING = "A pending contest already exists for this transaction."
ERROR_CONTEST_NOT_FOUND = "Contest not found or already reviewed."
ERROR_CONTEST_REVIEW_STATUS = "status must be \"approved\" or \"rejected\"."
ERROR_INVALID_CREDENTIALS = "Invalid email or password."
ERROR_INVALID_CREDENTIALS_ATTEMPTS = (
    "Invalid email or password. {attempts_left} attempt(s) remaining before account lockout."
)
ERROR_ACCOUNT_LOCKED = (
    "Account locked due to too many failed login attempts. Please try again in {minutes} minute(s)."
)
ERROR_NOT_AUTHENTICATED = "Could not validate credentials."
ERROR_EMAIL_REQUIRED = "Email is required."
ERROR_URL_REQUIRED = "url parameter is required"
ERROR_MARKETPLACE_UNAVAILABLE = "Failed to fetch catalog from external API."

# Success messages
SUCCESS_POINTS_APPLIED = "Points applied to {count} driver(s)"
SUCCESS_SETTINGS_SAVED = "Settings saved successfully"
SUCCESS_ITEM_ADDED_TO_CART = "Item added to cart."
SUCCESS_ITEM_REMOVED_FROM_CART = "Item removed from cart."
SUCCESS_CATALOG_ITEM_REMOVED = "Item removed from catalog."
SUCCESS_ORGANIZATION_DELETED = "Organization deleted successfully"
SUCCESS_ORGANIZATION_UPDATED = "Organization updated successfully"
SUCCESS_APPLICATION_SUBMITTED = "Driver application submitted successfully"
SUCCESS_APPLICATION_UPDATED = "Application updated successfully"
SUCCESS_LEFT_SPONSOR = "Successfully left sponsor"
SUCCESS_CONTEST_SUBMITTED = "Contest submitted successfully"
SUCCESS_CONTEST_REVIEWED = "Contest {status} successfully"
SUCCESS_LOGIN = "Login successful"
SUCCESS_USER_DELETED = "User deleted successfully"
