"""
Wrappers of the small PCL containers: std::vector, PCLPointCloud2,
Correspondence(s), ModelCoefficients and PointIndices.
"""

from ..binding import defconstructor, defpcltype, defptrconstructor, deref
from ..binding.wrappers import clone_native
from ..native import from_pcl_point_cloud2 as _from_blob
from ..native import to_pcl_point_cloud2 as _to_blob


class VectorMethods:

    def __len__(self):
        return deref(self).size()

    def __iter__(self):
        return iter(deref(self))

    def __getitem__(self, i):
        return deref(self)[i]

    def __setitem__(self, i, value):
        deref(self)[i] = value

    def append(self, value):
        deref(self).push_back(value)

    def resize(self, n):
        deref(self).resize(n)

    def to_numpy(self):
        return deref(self).to_numpy()

    def __repr__(self):
        return f'{type(self).__name__}({deref(self)})'


StdVectorPtr, StdVectorVal = defpcltype("StdVector", "std::vector", params=("T",), bases=(VectorMethods,))
StdVector = StdVectorPtr

defptrconstructor(StdVector, "", "std::vector")
defptrconstructor(StdVector, "n: int", "std::vector")
defconstructor(StdVectorVal, "", "std::vector")
defconstructor(StdVectorVal, "n: int", "std::vector")


PCLPointCloud2Ptr, PCLPointCloud2Val = defpcltype("PCLPointCloud2", "pcl::PCLPointCloud2")
PCLPointCloud2 = PCLPointCloud2Ptr

defptrconstructor(PCLPointCloud2, "", "pcl::PCLPointCloud2")
defconstructor(PCLPointCloud2Val, "", "pcl::PCLPointCloud2")


def to_pcl_point_cloud2(cloud, blob):
    _to_blob(deref(cloud), deref(blob))
    return blob


def from_pcl_point_cloud2(blob, cloud):
    _from_blob(deref(blob), deref(cloud))
    return cloud


class CorrespondenceMethods:

    @property
    def index_query(self):
        return deref(self).index_query

    @property
    def index_match(self):
        return deref(self).index_match

    @property
    def distance(self):
        return deref(self).distance


CorrespondencePtr, CorrespondenceVal = defpcltype("Correspondence", "pcl::Correspondence",
                                                  bases=(CorrespondenceMethods,))
Correspondence = CorrespondencePtr

defconstructor(CorrespondenceVal, "", "pcl::Correspondence")
defconstructor(CorrespondenceVal, "index_query: int, index_match: int, distance: float", "pcl::Correspondence")


class CorrespondencesMethods:

    def __len__(self):
        return deref(self).size()

    def __getitem__(self, i):
        return CorrespondenceVal.from_handle(clone_native(deref(self)[i]))

    def append(self, c):
        # stored by value, like push_back of a const reference
        deref(self).push_back(clone_native(deref(c)))


CorrespondencesPtr, CorrespondencesVal = defpcltype("Correspondences", "pcl::Correspondences",
                                                    bases=(CorrespondencesMethods,))
Correspondences = CorrespondencesPtr

defptrconstructor(Correspondences, "", "pcl::Correspondences")


class ModelCoefficientsMethods:

    def __len__(self):
        return deref(self).values.size()

    @property
    def values(self):
        return deref(self).values.to_numpy()

    @values.setter
    def values(self, values):
        deref(self).values.assign(values)


ModelCoefficientsPtr, ModelCoefficientsVal = defpcltype("ModelCoefficients", "pcl::ModelCoefficients",
                                                        bases=(ModelCoefficientsMethods,))
ModelCoefficients = ModelCoefficientsPtr

defptrconstructor(ModelCoefficients, "", "pcl::ModelCoefficients")
defconstructor(ModelCoefficientsVal, "", "pcl::ModelCoefficients")


class PointIndicesMethods:

    def __len__(self):
        return deref(self).indices.size()

    @property
    def indices(self):
        return deref(self).indices.to_numpy()

    @indices.setter
    def indices(self, indices):
        deref(self).indices.assign(indices)


PointIndicesPtr, PointIndicesVal = defpcltype("PointIndices", "pcl::PointIndices",
                                              bases=(PointIndicesMethods,))
PointIndices = PointIndicesPtr

defptrconstructor(PointIndices, "", "pcl::PointIndices")
defconstructor(PointIndicesVal, "", "pcl::PointIndices")
