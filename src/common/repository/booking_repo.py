from botocore.exceptions import ClientError
import logging
from typing import Optional, List
from boto3.dynamodb.conditions import Key
from common.models.bookings import (
    Booking,
    BookingStatus,
    PaymentStatus,
    CANCELLABLE_STATUSES,
)
from common.models.cancellations import (
    BookingAction,
    BookingActionLog,
    CancellationQuote,
    CancellationType,
)
from common.utils.custom_exceptions import BookingNotCancellable
from common.utils.datetime_normaliser import from_iso_string, to_iso_string
from decimal import Decimal
from datetime import datetime
from uuid import uuid4
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class BookingRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.table.get_item(
                Key={"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving booking {booking_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None

        cancelled_at = item.get("cancelled_at")
        # older rows only carry created_at
        booked_at = item.get("booked_at") or item.get("created_at")
        return Booking(
            booking_id=booking_id,
            user_id=item["user_id"],
            property_id=item["property_id"],
            agent_id=item.get("agent_id"),
            owner_id=item.get("owner_id"),
            check_in_date=from_iso_string(item["check_in"]),
            check_out_date=from_iso_string(item["check_out"]),
            total_amount=Decimal(str(item["total_amount"])),
            status=BookingStatus(item["booking_status"]),
            payment_status=PaymentStatus(
                item.get("payment_status", PaymentStatus.PENDING.value)
            ),
            cancellation_reason=item.get("cancellation_reason"),
            cancelled_at=from_iso_string(cancelled_at) if cancelled_at else None,
            booking_details=item.get("booking_details") or {},
            booked_at=from_iso_string(booked_at) if booked_at else None,
        )

    def apply_cancellation(
        self,
        booking: Booking,
        quote: CancellationQuote,
        payment_status: PaymentStatus,
        cancellation_type: CancellationType,
        reason: str,
        actor_id: str,
        action: BookingAction,
        cancelled_at: datetime,
    ) -> BookingActionLog:
        """Cancel the booking and append its audit entry in one transaction.

        The booking update only succeeds while the stored status is still
        pending or confirmed, so a second concurrent cancellation fails with
        BookingNotCancellable instead of being applied twice.
        """
        cancelled_iso = to_iso_string(cancelled_at)
        booking_details = {
            **booking.booking_details,
            "cancellation_type": cancellation_type.value,
            "cancellation_fee": quote.fee_amount,
            "refund_amount": quote.refund_amount,
            "cancellation_percentage": quote.fee_percentage,
        }
        log = BookingActionLog(
            log_id=str(uuid4()),
            booking_id=booking.booking_id,
            actor_id=actor_id,
            action=action,
            reason=reason,
            metadata={
                "cancellation_type": cancellation_type.value,
                "cancellation_fee": quote.fee_amount,
                "refund_amount": quote.refund_amount,
            },
            created_at=cancelled_at,
        )

        update_expression = (
            "SET #booking_status = :cancelled, #payment_status = :payment_status, "
            "#cancellation_reason = :reason, #cancelled_at = :cancelled_at, "
            "#updated_at = :cancelled_at, #booking_details = :booking_details"
        )
        attribute_names = {
            "#booking_status": "booking_status",
            "#payment_status": "payment_status",
            "#cancellation_reason": "cancellation_reason",
            "#cancelled_at": "cancelled_at",
            "#updated_at": "updated_at",
            "#booking_details": "booking_details",
        }
        attribute_values = {
            ":cancelled": BookingStatus.CANCELLED.value,
            ":payment_status": payment_status.value,
            ":reason": reason,
            ":cancelled_at": cancelled_iso,
            ":booking_details": booking_details,
        }
        guard_values = {
            f":from_{status.value}": status.value for status in CANCELLABLE_STATUSES
        }
        guard = "#booking_status IN ({})".format(", ".join(guard_values))

        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Update": {
                            "Key": {
                                "pk": f"BOOKING#{booking.booking_id}",
                                "sk": "DETAILS",
                            },
                            "TableName": self.table.name,
                            "UpdateExpression": update_expression,
                            "ExpressionAttributeNames": attribute_names,
                            "ExpressionAttributeValues": {
                                **attribute_values,
                                **guard_values,
                            },
                            "ConditionExpression": f"attribute_exists(pk) AND {guard}",
                        }
                    },
                    {
                        "Update": {
                            "Key": {
                                "pk": f"USER#{booking.user_id}",
                                "sk": f"BOOKING#{booking.booking_id}",
                            },
                            "TableName": self.table.name,
                            "UpdateExpression": update_expression,
                            "ExpressionAttributeNames": attribute_names,
                            "ExpressionAttributeValues": attribute_values,
                            "ConditionExpression": "attribute_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                "pk": f"BOOKING#{booking.booking_id}",
                                "sk": f"LOG#{cancelled_iso}#{log.log_id}",
                                "log_id": log.log_id,
                                "actor_id": actor_id,
                                "action": action.value,
                                "reason": reason,
                                "metadata": log.metadata,
                                "created_at": cancelled_iso,
                            },
                            "ConditionExpression": "attribute_not_exists(sk)",
                        }
                    },
                ]
            )
        except ClientError as err:
            if self._booking_condition_failed(err):
                logger.warning(
                    f"Booking {booking.booking_id} changed status before cancellation was applied"
                )
                raise BookingNotCancellable(booking.booking_id) from err
            logger.error(f"Error cancelling booking {booking.booking_id}: {err}")
            raise

        return log

    def get_booking_logs(self, booking_id: str) -> List[BookingActionLog]:
        query_kwargs = {
            "KeyConditionExpression": Key("pk").eq(f"BOOKING#{booking_id}")
            & Key("sk").begins_with("LOG#"),
            "ScanIndexForward": False,
        }
        items = []
        try:
            while True:
                response = self.table.query(**query_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                query_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as err:
            logger.error(f"Error retrieving booking {booking_id} logs: {err}")
            raise

        logs = []
        for item in items:
            logs.append(
                BookingActionLog(
                    log_id=item["log_id"],
                    booking_id=booking_id,
                    actor_id=item["actor_id"],
                    action=BookingAction(item["action"]),
                    reason=item.get("reason", ""),
                    metadata=item.get("metadata") or {},
                    created_at=from_iso_string(item["created_at"]),
                )
            )
        return logs

    @staticmethod
    def _booking_condition_failed(err: ClientError) -> bool:
        if err.response.get("Error", {}).get("Code") != "TransactionCanceledException":
            return False
        reasons = err.response.get("CancellationReasons") or []
        # first transact item is the guarded booking update
        return bool(reasons) and reasons[0].get("Code") == "ConditionalCheckFailed"
