"""EmailAddress value object for the contact address captured on orders."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from storefront.domain import storefront

_FORBIDDEN_CHARACTERS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@storefront.value_object
class EmailAddress:
    """A structurally valid email address: one @, a local part and a dotted domain."""

    address = String(required=True, max_length=254)

    @invariant.post
    def address_must_be_well_formed(self):
        email = self.address
        error = ValidationError({"address": [f"Invalid email address: {email!r}"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise error

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise error

        if not domain_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise error

        if ".." in local_part or ".." in domain_part:
            raise error

        for label in domain_part.split("."):
            if label.startswith("-") or label.endswith("-"):
                raise error

        if any(ch in email for ch in _FORBIDDEN_CHARACTERS):
            raise error
