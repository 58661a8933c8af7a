"""Sample APDUs and literal decoder outputs shared by the tests."""

AARQ_HEX = (
    "60 3A A1 09 06 07 60 85 74 05 08 01 01 A6 02 04 00 8A 02 07 80 8B 07 60 85 74 05 08 02 01 "
    "AC 0A 80 08 30 30 30 30 30 30 30 33 BE 10 04 0E 01 00 00 00 06 5F 1F 04 00 20 7E 1F 01 F4"
)
AARE_HEX = (
    "61 29 A1 09 06 07 60 85 74 05 08 01 01 A2 03 02 01 00 A3 05 A1 03 02 01 00 BE 10 04 0E 08 00 "
    "06 5F 1F 04 00 00 1E 19 04 C8 00 07"
)
GET_REQUEST_HEX = "C0 01 4F 00 01 00 00 81 00 00 00 02 00"
GET_RESPONSE_HEX = (
    "C4 01 4F 00 09 1E 00 0C C3 13 02 07 50 14 14 14 00 80 10 00 49 00 1D 08 26 C8 10 00 00 0B "
    "02 00 00 00 02 EE"
)
ACTION_REQUEST_HEX = (
    "C3 01 42 00 12 00 00 2C 00 00 FF 01 01 02 02 09 1E 4B 46 4D 41 44 32 31 4E 5F 45 56 4E 5F "
    "42 47 5F 32 4B 5F 38 4D 5F 44 53 5F 76 39 30 30 39 06 00 05 A0 B2"
)
ACTION_RESPONSE_HEX = "C7 01 42 0C 00"

AARQ_XML = """<AssociationRequest>
  <ApplicationContextName Value="LN" />
  <SenderACSERequirements Value="1" />
  <MechanismName Value="Low" />
  <CallingAuthentication Value="3030303030303033" />
  <InitiateRequest>
    <ProposedDlmsVersionNumber Value="06" />
    <ProposedConformance>
      <ConformanceBit Name="Action" />
      <ConformanceBit Name="Get" />
      <ConformanceBit Name="Set" />
    </ProposedConformance>
    <ProposedMaxPduSize Value="01F4" />
  </InitiateRequest>
</AssociationRequest>
"""

AARE_XML = """<AssociationResponse>
  <ApplicationContextName Value="LN" />
  <AssociationResult Value="00" />
  <ResultSourceDiagnostic>
    <ACSEServiceUser Value="00" />
  </ResultSourceDiagnostic>
  <InitiateResponse>
    <NegotiatedDlmsVersionNumber Value="06" />
    <NegotiatedConformance>
      <ConformanceBit Name="Get" />
      <ConformanceBit Name="Action" />
    </NegotiatedConformance>
    <NegotiatedMaxPduSize Value="04C8" />
    <VaaName Value="0007" />
  </InitiateResponse>
</AssociationResponse>
"""

GET_REQUEST_XML = """<GetRequest>
  <GetRequestNormal>
    <InvokeIdAndPriority Value="4F" />
    <AttributeDescriptor>
      <ClassId Value="0001" />
      <InstanceId Value="000081000000" />
      <AttributeId Value="02" />
    </AttributeDescriptor>
  </GetRequestNormal>
</GetRequest>
"""

GET_RESPONSE_XML = """<GetResponse>
  <GetResponseNormal>
    <InvokeIdAndPriority Value="4F" />
    <Result>
      <Data>
        <OctetString Value="4B464D" />
      </Data>
    </Result>
  </GetResponseNormal>
</GetResponse>
"""

GET_RESPONSE_ERROR_XML = """<GetResponse>
  <GetResponseNormal>
    <InvokeIdAndPriority Value="4F" />
    <Result>
      <DataAccessError Value="ObjectUndefined" />
    </Result>
  </GetResponseNormal>
</GetResponse>
"""

# Decoder output with the inner <ActionRequest> repeated inside the Normal wrapper.
ACTION_REQUEST_XML = """<ActionRequest>
  <ActionRequestNormal>
    <InvokeIdAndPriority Value="42" />
    <ActionRequest>
      <MethodDescriptor>
        <ClassId Value="0012" />
        <InstanceId Value="00002C0000FF" />
        <MethodId Value="01" />
      </MethodDescriptor>
      <MethodInvocationParameters>
        <Structure Qty="02" >
          <OctetString Value="4B464D414432314E5F45564E5F42475F324B5F384D5F44535F7639303039" />
          <UInt32 Value="0005A0B2" />
        </Structure>
      </MethodInvocationParameters>
    </ActionRequest>
  </ActionRequestNormal>
</ActionRequest>
"""

ACTION_RESPONSE_XML = """<ActionResponse>
  <ActionResponseNormal>
    <InvokeIdAndPriority Value="42" />
    <Result Value="UnmatchedType" />
  </ActionResponseNormal>
</ActionResponse>
"""

SET_REQUEST_XML = """<SetRequest>
  <SetRequestNormal>
    <InvokeIdAndPriority Value="C1" />
    <AttributeDescriptor>
      <ClassId Value="0008" />
      <InstanceId Value="0000010000FF" />
      <AttributeId Value="02" />
    </AttributeDescriptor>
    <Value>
      <OctetString Value="07E80A13FF0C1E2D00800000" />
    </Value>
  </SetRequestNormal>
</SetRequest>
"""

SET_RESPONSE_XML = """<SetResponse>
  <SetResponseNormal>
    <InvokeIdAndPriority Value="C1" />
    <Result Value="Success" />
  </SetResponseNormal>
</SetResponse>
"""


class FakeDecoder:
    """Returns canned XML (or raises) and records every PDU it was given."""

    def __init__(self, xml: str = "", error: Exception = None):
        self.xml = xml
        self.error = error
        self.calls = []

    def decode(self, pdu: bytes) -> str:
        self.calls.append(pdu)
        if self.error is not None:
            raise self.error
        return self.xml


class XmlByCommandDecoder:
    """Picks the canned XML by leading octet, for batch tests."""

    def __init__(self, by_command: dict):
        self.by_command = by_command

    def decode(self, pdu: bytes) -> str:
        return self.by_command[pdu[0]]
