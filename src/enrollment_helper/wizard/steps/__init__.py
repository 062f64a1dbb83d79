"""One terminal page per wizard stage."""

NEXT = "next"
BACK = "back"
