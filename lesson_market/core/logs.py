START = "Starting %s (%s)"
STOP = "%s stopped"

LESSONS_SEARCHED = "Catalog search: %s lessons matched, page %s/%s, sort=%s"
LESSON_STATUS_CHANGED = "Lesson %s status %s -> %s"
LESSON_STATUS_REJECTED = "Lesson %s status change %s -> %s rejected"
LESSON_CAPACITY_CHANGED = "Lesson %s capacity %s -> %s"
LESSON_CAPACITY_REJECTED = "Lesson %s capacity %s is below %s confirmed participants"

SLOTS_COMMITTED = "Committed %s slots for lesson %s"
SLOTS_NOTHING_TO_COMMIT = "No slots selected for lesson %s"
DRAFT_ACTION = "Schedule draft action %s applied=%s, %s dates selected"

BOOKING_REQUESTED = "Booking %s requested for slot %s"
BOOKING_STATUS_CHANGED = "Booking %s status %s -> %s"
BOOKING_REJECTED = "Booking on slot %s rejected: %s"

UNHANDLED = "Unhandled exception on %s %s"
