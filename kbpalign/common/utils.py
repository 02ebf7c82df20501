import hashlib


def only1(l):
    """
    Checks if the list 'l' of booleans has one and only one True value
    :param l: list of booleans
    :return: True if list has one and only one True value, False otherwise
    """
    true_found = False
    for v in l:
        if v:
            if true_found:
                return False
            else:
                true_found = True
    return true_found


def stable_hash(*fields):
    """A hex digest over the string form of the given fields, stable across interpreter runs
    (unlike the builtin hash, which is salted per process).

    :rtype: str
    """
    h = hashlib.sha1()
    for field in fields:
        h.update(str(field).encode('utf-8'))
        h.update(b'\t')
    return h.hexdigest()


class Struct:
    """A structure that can have any fields defined

    Example usage:
    options = Struct(answer=42, lineline=80, font='courier')
    options.answer (prints out 42)
    # adding more
    options.cat = 'dog'
    options.cat (prints out 'dog')
    """
    def __init__(self, **entries):
        self.__dict__.update(entries)


class F1Score(object):
    def __init__(self, c, num_true, num_predict, class_label='class_label'):
        self.c = c
        self.num_true = num_true
        self.num_predict = num_predict
        self.class_label = class_label
        self.calculate_score()

    def calculate_score(self):
        if self.c > 0 and self.num_true > 0:
            self.recall = float(self.c) / self.num_true
        else:
            self.recall = 0

        if self.c > 0 and self.num_predict > 0:
            self.precision = float(self.c) / self.num_predict
        else:
            self.precision = 0

        if self.recall > 0 and self.precision > 0:
            self.f1 = (2 * self.recall * self.precision) / (self.recall + self.precision)
        else:
            self.f1 = 0

    def to_string(self):
        return '%s #C=%d,#R=%d,#P=%d R,P,F=%.2f,%.2f,%.6f' % (self.class_label, self.c, self.num_true, self.num_predict, self.recall, self.precision, self.f1)

    def to_json(self):
        d = dict()
        d['label'] = self.class_label
        d['c'] = int(self.c)
        d['num_true'] = int(self.num_true)
        d['num_predict'] = int(self.num_predict)
        d['recall'] = self.recall
        d['precision'] = self.precision
        d['f1'] = self.f1
        return d
